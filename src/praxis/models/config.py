"""Pydantic model for template fetch configuration.

Defaults point at the upstream Praxis repository. Each value can be
overridden through an environment variable, which is mainly useful for
mirrors and for testing against a local server.
"""

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TARBALL_URL = "https://api.github.com/repos/DFilipeS/praxis/tarball/main"
DEFAULT_MAX_DOWNLOAD_BYTES = 50 * 1024 * 1024
DEFAULT_TIMEOUT_S = 30.0

_ENV_FIELDS = {
    "PRAXIS_TARBALL_URL": "tarball_url",
    "PRAXIS_MAX_DOWNLOAD_BYTES": "max_download_bytes",
    "PRAXIS_TIMEOUT": "timeout_s",
}


class FetchConfig(BaseModel):
    """Settings for downloading the template bundle.

    Attributes:
        tarball_url: URL of the repository tarball.
        max_download_bytes: Largest accepted archive size in bytes.
        timeout_s: HTTP timeout in seconds.
    """

    tarball_url: str = Field(default=DEFAULT_TARBALL_URL)
    max_download_bytes: int = Field(default=DEFAULT_MAX_DOWNLOAD_BYTES, gt=0)
    timeout_s: float = Field(default=DEFAULT_TIMEOUT_S, gt=0)


def load_fetch_config(environ: Mapping[str, str] | None = None) -> FetchConfig:
    """Build a FetchConfig from environment overrides.

    Args:
        environ: Mapping to read overrides from (defaults to os.environ).

    Returns:
        FetchConfig with overrides applied. Invalid override values are
        logged and the defaults are used instead.
    """
    env = os.environ if environ is None else environ
    overrides = {field: env[var] for var, field in _ENV_FIELDS.items() if env.get(var)}

    try:
        return FetchConfig.model_validate(overrides)
    except ValidationError as e:
        logger.warning(f"Ignoring invalid fetch configuration from environment: {e}")
        return FetchConfig()
