from __future__ import annotations


class PublishError(RuntimeError):
    """Raised when the rendered site cannot be published."""
