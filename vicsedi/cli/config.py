"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. --config <path> CLI flag
2. ./vicsedi.yaml (working directory)
3. ~/.vicsedi/config.yaml (user home)

Environment variables override YAML: VICSEDI_<SECTION>_<KEY>.
${VAR} references in YAML values resolve from environment at load time.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel

from vicsedi.edi.envelope import EnvelopeSettings
from vicsedi.edi.models import Dialect

logger = logging.getLogger(__name__)

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def resolve_env_vars(value: str) -> str:
    """Resolve ${VAR} references in a string from environment variables.

    Args:
        value: String potentially containing ${VAR} references.

    Returns:
        String with all ${VAR} references replaced by their env values.
        Missing env vars resolve to empty string.
    """
    def _replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    """Recursively resolve ${VAR} references in a nested data structure."""
    if isinstance(data, str):
        return resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    return data


class ServerConfig(BaseModel):
    """Configuration for the HTTP API process."""

    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "info"


class EnvelopeConfig(BaseModel):
    """Interchange sender/receiver identification."""

    sender_id: str = "SENDERID"
    receiver_id: str = "RECEIVERID"
    usage_indicator: str = "T"

    def to_settings(self) -> EnvelopeSettings:
        return EnvelopeSettings(
            sender_id=self.sender_id,
            receiver_id=self.receiver_id,
            usage_indicator=self.usage_indicator,
        )


class EDIConfig(BaseModel):
    """Codec defaults."""

    default_dialect: Dialect = Dialect.V4010


class VicsEdiConfig(BaseModel):
    """Top-level configuration for vicsedi."""

    server: ServerConfig = ServerConfig()
    envelope: EnvelopeConfig = EnvelopeConfig()
    edi: EDIConfig = EDIConfig()


def _find_config_file() -> Path | None:
    """Search for config file in standard locations.

    Returns:
        Path to config file if found, None otherwise.
    """
    candidates = [
        Path.cwd() / "vicsedi.yaml",
        Path.cwd() / "vicsedi.yml",
        Path.home() / ".vicsedi" / "config.yaml",
        Path.home() / ".vicsedi" / "config.yml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply VICSEDI_<SECTION>_<KEY> env var overrides to config data.

    For example, ``VICSEDI_ENVELOPE_SENDER_ID`` maps to section
    ``envelope``, field ``sender_id``.

    Args:
        data: Parsed YAML config dict.

    Returns:
        Config dict with env var overrides applied.
    """
    prefix = "VICSEDI_"
    known_sections = sorted(VicsEdiConfig.model_fields.keys(), key=len, reverse=True)
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        suffix = key[len(prefix):].lower()  # e.g. "envelope_sender_id"
        matched_section = None
        matched_field = None
        for section in known_sections:
            section_prefix = section + "_"
            if suffix.startswith(section_prefix):
                matched_section = section
                matched_field = suffix[len(section_prefix):]
                break
        if matched_section is None or not matched_field:
            continue
        if matched_section not in data:
            data[matched_section] = {}
        if isinstance(data[matched_section], dict):
            data[matched_section][matched_field] = value
    return data


def load_config(config_path: str | None = None) -> VicsEdiConfig:
    """Load vicsedi configuration from YAML file with env var resolution.

    Args:
        config_path: Explicit path to config file. If None, searches
            standard locations (cwd, then ~/.vicsedi/).

    Returns:
        Parsed and validated config. Defaults (plus env overrides) when no
        file is found.

    Raises:
        FileNotFoundError: If an explicit config_path does not exist.
    """
    data: dict[str, Any] = {}
    if config_path:
        path: Path | None = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()

    if path is not None:
        logger.info("Loading config from %s", path)
        with open(path) as f:
            raw_data = yaml.safe_load(f) or {}
        data = _resolve_env_vars_recursive(raw_data)

    data = _apply_env_overrides(data)
    return VicsEdiConfig(**data)
