from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import yaml
from dotenv import load_dotenv

from question_search.index.retry import RetryPolicy


logger = logging.getLogger(__name__)

CONFIG_FILE_PATH = Path(__file__).parent / "config.yaml"
DEFAULT_TYPESENSE_PORT = 8108

# Service-discovery style keys are checked after the plain ones.
_URI_KEYS = ("TYPESENSE_URI", "services__typesense__typesense__0")
_API_KEY_KEYS = ("TYPESENSE_API_KEY", "typesense-api-key")


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing or unusable."""


def load_config(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a given YAML file path.

    Args:
        config_path: Explicit path to the configuration file.

    Returns:
        Parsed configuration dictionary.

    Raises:
        FileNotFoundError: If the configuration file is not found.
        ValueError: If there is an error parsing the YAML file.
    """
    path = Path(config_path)

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Configuration file not found: {path}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML file '{path}': {e}") from e

    return data or {}


@dataclass(frozen=True)
class Settings:
    typesense_uri: str
    typesense_api_key: str
    collection_name: str = "questions"
    request_timeout_s: float = 10.0
    search_timeout_s: float = 30.0
    app_env: str = "production"

    @property
    def base_url(self) -> str:
        """Typesense node URL; the ``typesense`` scheme is served over plain http."""
        parts = urlsplit(self.typesense_uri)
        if not parts.hostname:
            raise ConfigurationError(
                f"Typesense URI has no host: {self.typesense_uri!r}"
            )
        scheme = (parts.scheme or "http").lower()
        if scheme == "typesense":
            scheme = "http"
        port = parts.port or DEFAULT_TYPESENSE_PORT
        return f"{scheme}://{parts.hostname}:{port}"

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"


def _first_env(keys: tuple[str, ...]) -> Optional[str]:
    for key in keys:
        value = os.getenv(key)
        if value and value.strip():
            return value.strip()
    return None


def _float_env(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from e


def load_settings() -> Settings:
    """Read settings from the environment (and a local .env file, if any).

    Raises:
        ConfigurationError: If the Typesense URI or API key is missing.
    """
    load_dotenv(override=True)

    uri = _first_env(_URI_KEYS)
    if not uri:
        raise ConfigurationError("Typesense URI not found in config")

    api_key = _first_env(_API_KEY_KEYS)
    if not api_key:
        raise ConfigurationError("Typesense Api Key not found in config")

    settings = Settings(
        typesense_uri=uri,
        typesense_api_key=api_key,
        collection_name=os.getenv("TYPESENSE_COLLECTION", "questions"),
        request_timeout_s=_float_env("TYPESENSE_REQUEST_TIMEOUT", 10.0),
        search_timeout_s=_float_env("SEARCH_TIMEOUT", 30.0),
        app_env=os.getenv("APP_ENV", "production"),
    )
    # Fail early on a URI we cannot turn into a node address.
    logger.info("Using Typesense node %s", settings.base_url)
    return settings


def load_retry_policy(config_path: Path | str | None = None) -> RetryPolicy:
    """Build the retry policy from the ``retry`` section of a YAML file.

    Falls back to the built-in defaults when the file does not exist.
    """
    path = Path(config_path or os.getenv("RETRY_POLICY_PATH") or CONFIG_FILE_PATH)
    try:
        cfg = load_config(path)
    except FileNotFoundError:
        logger.info("No retry policy file at %s, using defaults", path)
        return RetryPolicy()

    section = cfg.get("retry", {}) if isinstance(cfg, dict) else {}
    if not isinstance(section, dict):
        raise ValueError(f"'retry' section in '{path}' must be a mapping")

    defaults = RetryPolicy()
    return RetryPolicy(
        max_attempts=int(section.get("max_attempts", defaults.max_attempts)),
        base_delay_s=float(section.get("base_delay_s", defaults.base_delay_s)),
        backoff_base=float(section.get("backoff_base", defaults.backoff_base)),
        jitter=float(section.get("jitter", defaults.jitter)),
        retry_status=tuple(
            int(s) for s in section.get("retry_status", defaults.retry_status)
        ),
    )
