"""Configuration management for tagbridge.

Where: src/tagbridge/config/config.py
What: Load, validate and persist the TOML configuration file as a singleton.
Why: Every command reads the same contact, pacing and cover settings.
"""

import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, ClassVar

from tagbridge.config.paths import default_config_path
from tagbridge.platform.logging import logger

RATE_LIMIT_SECONDS_DEFAULT: float = 1.1
QUERY_TIMEOUT_SECONDS_DEFAULT: float = 20.0
POLL_INTERVAL_SECONDS_DEFAULT: float = 0.1
SEARCH_ATTEMPTS_DEFAULT: int = 3
COVER_SIZE_DEFAULT: int = 500
DURATION_TOLERANCE_SECONDS_DEFAULT: int = 15


def _path_field(default: Path | None = None) -> Any:
    """Create a field for Path objects with proper conversion."""
    return field(default=default, metadata={"path": True})


@dataclass
class Config:
    """Application configuration."""

    # Log file path
    log_file: Path | None = _path_field()

    # MusicBrainz identity
    mb_app_name: str | None = None
    mb_app_version: str | None = None
    mb_contact: str | None = None

    # Remote call pacing and deadlines
    rate_limit_seconds: float = RATE_LIMIT_SECONDS_DEFAULT
    query_timeout_seconds: float = QUERY_TIMEOUT_SECONDS_DEFAULT
    poll_interval_seconds: float = POLL_INTERVAL_SECONDS_DEFAULT
    search_attempts: int = SEARCH_ATTEMPTS_DEFAULT

    # Reconciliation
    cover_size: int = COVER_SIZE_DEFAULT
    duration_tolerance_seconds: int = DURATION_TOLERANCE_SECONDS_DEFAULT

    # Mirror written tags into extended file attributes where supported
    mirror_attributes: bool = True

    _instance: ClassVar["Config | None"] = None
    _loaded_from: ClassVar[Path | None] = None

    def __post_init__(self) -> None:
        """Convert string paths to ``Path`` objects using field metadata."""
        from dataclasses import fields

        for f in fields(self):
            if not f.metadata.get("path", False):
                continue
            value = getattr(self, f.name)
            if isinstance(value, str):
                setattr(self, f.name, Path(value) if value else None)

    def save(self) -> None:
        """Save configuration to file."""
        config_dict = asdict(self)

        for key, value in config_dict.items():
            if isinstance(value, Path):
                config_dict[key] = str(value)

        try:
            target = default_config_path()
            target.parent.mkdir(parents=True, exist_ok=True)
            _ = target.write_text(self._render_toml(config_dict), encoding="utf-8")
            logger.info("Configuration saved to %s", target)
        except Exception as e:
            logger.error("Failed to save configuration: %s", e)
            raise

    def _render_toml(self, config: dict[str, Any]) -> str:
        """Render configuration as TOML with inline guidance."""

        lines: list[str] = []

        lines.append("# tagbridge configuration file")
        lines.append("")

        lines.append("# Log file path (optional)")
        lines.append('# Example: log_file = "/path/to/logs/tagbridge.log"')
        if config["log_file"] is not None:
            lines.append(f"log_file = {self._format_toml_value(config['log_file'])}")
        lines.append("")

        lines.append("# MusicBrainz application identity (optional)")
        lines.append("# Sent as 'name/version (contact)' with every catalog request")
        if config.get("mb_app_name"):
            lines.append(f"mb_app_name = {self._format_toml_value(config['mb_app_name'])}")
        if config.get("mb_app_version"):
            lines.append(f"mb_app_version = {self._format_toml_value(config['mb_app_version'])}")
        if config.get("mb_contact"):
            lines.append(f"mb_contact = {self._format_toml_value(config['mb_contact'])}")
        lines.append("")

        lines.append("# Remote call pacing (seconds). MusicBrainz allows about one call per second.")
        for key in (
            "rate_limit_seconds",
            "query_timeout_seconds",
            "poll_interval_seconds",
            "search_attempts",
        ):
            lines.append(f"{key} = {self._format_toml_value(config[key])}")
        lines.append("")

        lines.append("# Album matching")
        lines.append("# cover_size: preferred Cover Art Archive thumbnail (250, 500, 1200)")
        lines.append(f"cover_size = {self._format_toml_value(config['cover_size'])}")
        lines.append(
            "duration_tolerance_seconds = "
            f"{self._format_toml_value(config['duration_tolerance_seconds'])}"
        )
        lines.append("")

        lines.append("# Copy written tags into user.* extended attributes (Linux only)")
        lines.append(f"mirror_attributes = {self._format_toml_value(config['mirror_attributes'])}")
        lines.append("")

        return "\n".join(lines)

    def _format_toml_value(self, value: Any) -> str:
        """Format a value for TOML serialization."""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, Path)):
            return f'"{str(value)}"'
        return str(value)

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from file, creating a default one when absent."""
        if cls._instance is not None:
            return cls._instance

        config_file = default_config_path()

        try:
            if config_file.exists():
                with open(config_file, "rb") as f:
                    config_dict = tomllib.load(f)

                known = set(cls.__dataclass_fields__)
                unknown = sorted(key for key in config_dict if key not in known)
                for key in unknown:
                    logger.warning("Ignoring unknown configuration key '%s'", key)
                    del config_dict[key]

                for key, value in config_dict.items():
                    if key.endswith("_file") and isinstance(value, str) and not value.strip():
                        config_dict[key] = None

                logger.debug("Configuration loaded from %s", config_file)
                instance = cls(**config_dict)
                cls._instance = instance
                cls._loaded_from = config_file
                return instance

            config = cls()
            config.save()
            logger.info("Created default configuration at %s", config_file)
            cls._instance = config
            cls._loaded_from = config_file
            return config

        except Exception as e:
            logger.error("Failed to load configuration: %s", e)
            raise


config = Config.load()
