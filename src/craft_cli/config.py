"""Option resolution with layered precedence, plus XDG data-directory lookup.

Connection settings are never persisted: each invocation merges three
layers into one immutable :class:`~craft_cli.models.ResolvedConfig`:

1. Explicit flags (``--url``, ``--token``)
2. Environment variables (``CRAFT_API_URL``, ``CRAFT_API_TOKEN``)
3. Defaults (30 second timeout)

:func:`get_data_dir` is only used for crash logs written by
:func:`craft_cli.app.main`.
"""

from __future__ import annotations

import os
import platform
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from craft_cli.exceptions import ConfigurationError
from craft_cli.models import GlobalOptions, ResolvedConfig

_APP_NAME = "craft-cli"

ENV_API_URL = "CRAFT_API_URL"
ENV_API_TOKEN = "CRAFT_API_TOKEN"

DEFAULT_TIMEOUT_MS = 30_000


# --- Precedence resolution ---


def resolve_options(
    flags: Union[GlobalOptions, Mapping[str, Any], None] = None,
    env: Optional[Mapping[str, str]] = None,
) -> ResolvedConfig:
    """Resolve the connection settings for one invocation.

    Precedence (high to low):
        1. Explicit flags (``flags.url``, ``flags.token``)
        2. Environment variables (``CRAFT_API_URL``, ``CRAFT_API_TOKEN``)
        3. Defaults

    Args:
        flags: Explicit flag values, as a :class:`GlobalOptions` or a plain
            mapping with ``url``/``token`` keys. ``None`` means no flags.
        env: Environment mapping; defaults to ``os.environ``.

    Returns:
        The merged, immutable :class:`ResolvedConfig`.

    Raises:
        ConfigurationError: If no base URL is available from any layer.
    """
    if flags is None:
        flags = GlobalOptions()
    elif not isinstance(flags, GlobalOptions):
        flags = GlobalOptions(url=flags.get("url"), token=flags.get("token"))
    if env is None:
        env = os.environ

    base_url = flags.url if flags.url is not None else env.get(ENV_API_URL)
    if not base_url:
        raise ConfigurationError(
            f"Missing API base URL. Provide --url or set {ENV_API_URL} "
            "(e.g. https://connect.craft.do/links/<share-id>/api/v1)."
        )

    token = flags.token if flags.token is not None else env.get(ENV_API_TOKEN)

    return ResolvedConfig(
        base_url=normalize_base_url(base_url),
        token=token or None,
        timeout_ms=DEFAULT_TIMEOUT_MS,
    )


def normalize_base_url(url: str) -> str:
    """Strip exactly one trailing slash; no other normalisation is applied."""
    return url[:-1] if url.endswith("/") else url


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/craft-cli/`` (default ``~/.local/share/craft-cli/``).
    On macOS/Windows: ``~/.craft-cli/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path
