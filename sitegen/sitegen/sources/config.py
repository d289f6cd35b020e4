"""Loading of the ``_site.yml`` site configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..core.models import SiteConfig

logger = logging.getLogger(__name__)

SITE_CONFIG_NAME = "_site.yml"


class SiteConfigError(ValueError):
    """Raised when ``_site.yml`` cannot be read or validated."""


def load_site_config(site_root: Path) -> SiteConfig:
    """Load and validate the site configuration.

    A missing ``_site.yml`` yields the default configuration.

    Args:
        site_root: Directory containing the site sources

    Returns:
        Validated site configuration
    """
    config_path = site_root / SITE_CONFIG_NAME
    if not config_path.exists():
        logger.debug(f"No {SITE_CONFIG_NAME} in {site_root}; using defaults")
        return SiteConfig()

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise SiteConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise SiteConfigError(f"{config_path} must contain a mapping")

    try:
        return SiteConfig.model_validate(data)
    except ValidationError as e:
        raise SiteConfigError(f"Invalid site config {config_path}:\n{e}") from e
