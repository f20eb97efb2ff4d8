"""
Configuration loading for the app and the terminal entry point.
"""

import logging
import os

import yaml
from dotenv import load_dotenv

from fitplanner.errors import ConfigurationError


ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_PATH = os.path.join(ROOT_DIR, "config.yaml")
DEFAULT_DB_PATH = "data/fitplanner.db"

DEFAULTS = {
    "claude": {
        "api_key_env": "ANTHROPIC_API_KEY",
        "model": "claude-sonnet-4-5",
        "max_tokens": 4000,
        "timeout": 120,
    },
    "generation": {
        "poll_interval_seconds": 1,
        "max_poll_attempts": 600,
    },
    "database": {"path": DEFAULT_DB_PATH},
    "auth": {
        "bcrypt_rounds": 12,
        "google_client_id_env": "GOOGLE_CLIENT_ID",
    },
    "plans": {"recent_limit": 10},
    "logging": {"level": "INFO"},
}


def load_config(config_path=None):
    """
    Load config.yaml and fill in defaults for missing sections.

    Args:
        config_path: Path to the YAML file (defaults to config.yaml at repo root)

    Returns:
        Configuration dictionary
    """
    path = config_path or DEFAULT_CONFIG_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigurationError(f"{path} not found") from None
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse {path}: {e}") from e

    config = {}
    for section, defaults in DEFAULTS.items():
        config[section] = {**defaults, **(loaded.get(section) or {})}
    for section, values in loaded.items():
        config.setdefault(section, values)
    return config


def load_environment(env_path=None):
    """Load .env from the repo root (local only)."""
    load_dotenv(env_path or os.path.join(ROOT_DIR, ".env"))


def get_secret(name, secrets=None):
    """Read a secret from Streamlit secrets first, then the environment."""
    if secrets is not None:
        try:
            if name in secrets:
                return secrets[name]
        except FileNotFoundError:
            # st.secrets raises when no secrets.toml exists
            pass
    return os.getenv(name)


def get_api_key(config, secrets=None):
    """
    Resolve the generation API key.

    Raises:
        ConfigurationError: If the key is not configured
    """
    env_name = config["claude"]["api_key_env"]
    api_key = get_secret(env_name, secrets)
    if not api_key:
        raise ConfigurationError(
            f"{env_name} is missing. Add it to your .env file or Streamlit secrets."
        )
    return api_key


def get_google_client_id(config, secrets=None):
    return get_secret(config["auth"]["google_client_id_env"], secrets)


def get_db_path(config):
    return (config.get("database", {}) or {}).get("path") or DEFAULT_DB_PATH


def configure_logging(config):
    level_name = str(config.get("logging", {}).get("level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
