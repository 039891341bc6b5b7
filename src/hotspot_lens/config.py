"""Configuration loading and management for Hotspot Lens.

Configuration sources are merged in priority order:
    1. Defaults (defined in HotspotConfig)
    2. Global config (~/.hotspot-lens.toml)
    3. Project config (./hotspot-lens.toml)
    4. Explicit config file
    5. Environment variables (HOTSPOT_* prefix, plus GITHUB_TOKEN)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(workers=4)
    >>> config.workers
    4
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

# Hard ceiling on commits inspected per analysis run
MAX_COMMITS_LIMIT = 1000


@dataclass(frozen=True)
class HotspotConfig:
    """Settings for running a hotspot analysis.

    Attributes:
        Engine:
            max_commits: Commits inspected per run (1..1000)
            workers: Concurrent file-change fetches (1 = sequential)
            default_ref: Ref analyzed when none is given
            default_time_window: Lookback window in days when none is given

        Local git:
            git_timeout_seconds: Timeout for each git subprocess

        GitHub:
            github_api_url: REST API base URL (GitHub Enterprise supported)
            github_token: Personal access token, optional for public repos
            request_timeout_seconds: Timeout for each HTTP request

        Caching:
            cache_enabled: Cache analysis results on disk
            cache_dir: Directory for cache storage
            cache_ttl_hours: Cache time-to-live in hours

        Output:
            verbosity: Logging verbosity level
            log_file: Also append log records to this file
    """

    max_commits: int = MAX_COMMITS_LIMIT
    workers: int = 1
    default_ref: str = "HEAD"
    default_time_window: int = 30

    git_timeout_seconds: int = 30

    github_api_url: str = "https://api.github.com"
    github_token: Optional[str] = None
    request_timeout_seconds: float = 10.0

    cache_enabled: bool = True
    cache_dir: str = ".hotspot-cache"
    cache_ttl_hours: int = 1

    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not 1 <= self.max_commits <= MAX_COMMITS_LIMIT:
            raise InvalidConfigError(
                "max_commits", self.max_commits, f"must be between 1 and {MAX_COMMITS_LIMIT}"
            )
        if self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.default_time_window < 1:
            raise InvalidConfigError(
                "default_time_window", self.default_time_window, "must be at least 1 day"
            )
        if not self.default_ref:
            raise InvalidConfigError("default_ref", self.default_ref, "must not be empty")
        if self.git_timeout_seconds < 1:
            raise InvalidConfigError(
                "git_timeout_seconds", self.git_timeout_seconds, "must be at least 1"
            )
        if self.request_timeout_seconds <= 0:
            raise InvalidConfigError(
                "request_timeout_seconds", self.request_timeout_seconds, "must be positive"
            )
        if not self.github_api_url.startswith(("http://", "https://")):
            raise InvalidConfigError(
                "github_api_url", self.github_api_url, "must be an http(s) URL"
            )
        if self.cache_ttl_hours < 0:
            raise InvalidConfigError("cache_ttl_hours", self.cache_ttl_hours, "must be non-negative")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "must be one of quiet, normal, verbose"
            )

    @property
    def cache_ttl_seconds(self) -> int:
        """Get cache TTL in seconds."""
        return self.cache_ttl_hours * 3600


def load_config(config_file: Optional[Path] = None, **overrides) -> HotspotConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags); ``None``
            values are ignored so unset CLI options fall through.

    Returns:
        Validated HotspotConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".hotspot-lens.toml"
    if global_config.exists():
        merged.update(_read_config_file(global_config, "global config"))

    project_config = Path.cwd() / "hotspot-lens.toml"
    if project_config.exists():
        merged.update(_read_config_file(project_config, "project config"))

    if config_file is not None:
        if not Path(config_file).exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_read_config_file(Path(config_file), "config file"))

    merged.update(_load_env_vars())

    if "github_token" not in merged and os.environ.get("GITHUB_TOKEN"):
        merged["github_token"] = os.environ["GITHUB_TOKEN"]

    # Convert verbosity boolean flags to string
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(HotspotConfig)}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    return HotspotConfig(**merged)


def _read_config_file(path: Path, label: str) -> dict:
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}") from e
    # Allow settings to live under a [hotspot-lens] table
    section = data.get("hotspot-lens")
    if isinstance(section, dict):
        return dict(section)
    return data


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from HOTSPOT_* environment variables.

    Every HotspotConfig field can be set, e.g. HOTSPOT_MAX_COMMITS=500,
    HOTSPOT_WORKERS=4, HOTSPOT_CACHE_ENABLED=false, HOTSPOT_GITHUB_TOKEN=...

    Returns:
        Dict of field_name -> parsed_value for any HOTSPOT_* vars found.
    """
    type_hints = get_type_hints(HotspotConfig)
    result: dict[str, Any] = {}

    for field_name in HotspotConfig.__dataclass_fields__:
        env_key = f"HOTSPOT_{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}") from e
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the type of its dataclass field."""
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
