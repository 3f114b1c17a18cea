# =============================================================================
# eco_core/config.py
# Application Settings
# =============================================================================
"""
Settings are layered: built-in defaults, then the ``[ecometrics]`` table of
Streamlit secrets, then ``ECOMETRICS_<FIELD>`` environment variables.

Expected secrets.toml format:
    [ecometrics]
    mode = "remote"
    api_base_url = "https://api.example.org/api"
    request_timeout = 15
"""

from __future__ import annotations
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import logging

import streamlit as st

from eco_core.errors import ConfigurationError
from eco_core.offline.bootstrap import DEFAULT_SEED_PATH

logger = logging.getLogger(__name__)

ENV_PREFIX = "ECOMETRICS_"
SECRETS_SECTION = "ecometrics"
VALID_MODES = ("local", "remote")


@dataclass
class Settings:
    """Runtime configuration of the data layer and its host."""
    mode: str = "local"
    api_base_url: str = "http://localhost:3000/api"
    seed_source: str = str(DEFAULT_SEED_PATH)
    storage_path: str = str(Path("local_data") / "ecometrics.db")
    request_timeout: float = 30.0
    export_dir: str = "exports"
    log_level: str = "INFO"
    log_to_file: bool = True
    debug: bool = False

    def validate(self) -> Settings:
        if self.mode not in VALID_MODES:
            raise ConfigurationError(
                f"Unknown data mode '{self.mode}'",
                config_key="mode",
                expected_type=" | ".join(VALID_MODES),
            )
        if self.request_timeout <= 0:
            raise ConfigurationError(
                "request_timeout must be positive",
                config_key="request_timeout",
                expected_type="float > 0",
            )
        if self.mode == "remote" and not self.api_base_url:
            raise ConfigurationError("api_base_url is required in remote mode", config_key="api_base_url")
        return self


def _coerce(name: str, raw: Any, target: type) -> Any:
    """Convert a secrets/env value to the field's type."""
    try:
        if target is bool:
            if isinstance(raw, bool):
                return raw
            value = str(raw).strip().lower()
            if value in ("1", "true", "yes", "on"):
                return True
            if value in ("0", "false", "no", "off"):
                return False
            raise ValueError(raw)
        if target is float:
            return float(raw)
        return str(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Invalid value {raw!r} for setting '{name}'",
            config_key=name,
            expected_type=target.__name__,
        )


def _apply(settings: Settings, values: Mapping[str, Any]) -> Settings:
    # Every field has a default, so its current value gives the target type
    updates = {
        f.name: _coerce(f.name, values[f.name], type(getattr(settings, f.name)))
        for f in fields(settings) if f.name in values
    }
    return replace(settings, **updates)


def _read_secrets() -> Dict[str, Any]:
    """The [ecometrics] secrets table, or {} when no secrets are configured."""
    try:
        if SECRETS_SECTION in st.secrets:
            return dict(st.secrets[SECRETS_SECTION])
    except Exception as e:
        # st.secrets raises when no secrets.toml exists at all
        logger.debug(f"No Streamlit secrets available: {e}")
    return {}


def _read_env(environ: Mapping[str, str]) -> Dict[str, str]:
    values = {}
    for f in fields(Settings):
        key = f"{ENV_PREFIX}{f.name.upper()}"
        if key in environ:
            values[f.name] = environ[key]
    return values


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    secrets: Optional[Mapping[str, Any]] = None,
) -> Settings:
    """
    Build validated settings.

    Args:
        environ: Environment mapping (default: os.environ)
        secrets: Secrets table (default: st.secrets["ecometrics"] if configured)

    Raises:
        ConfigurationError: a value cannot be parsed or is out of range
    """
    settings = Settings()
    settings = _apply(settings, _read_secrets() if secrets is None else secrets)
    settings = _apply(settings, _read_env(os.environ if environ is None else environ))
    return settings.validate()
