from __future__ import annotations

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class TriggerContext(BaseSettings):
    """CI trigger information, read from the GITHUB_* environment."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", case_sensitive=False)

    ref: str = ""
    event_name: str = "push"
    repository: str = ""
    sha: str = ""
    token: SecretStr | None = None

    @property
    def branch(self) -> str:
        prefix = "refs/heads/"
        return self.ref[len(prefix) :] if self.ref.startswith(prefix) else ""

    def is_primary(self, primary_branch: str) -> bool:
        return self.ref == f"refs/heads/{primary_branch}"


class NetlifySettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NETLIFY_", case_sensitive=False)

    auth_token: SecretStr | None = None
    site_id: str | None = None
    api_url: str = "https://api.netlify.com/api/v1"
