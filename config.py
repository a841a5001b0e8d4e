"""Configuration for the fleet admin web app and CLI."""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from jsonschema import validate, ValidationError

from models import DEFAULT_API_URL, DEFAULT_TIMEOUT
from models.validation import load_schema

DEFAULT_CONFIG_FILE = "fleet.yaml"
DEFAULT_SECRET_KEY = "dev-secret-key-change-in-prod"


class ConfigError(Exception):
    """The config file is unreadable or does not match the schema."""


@dataclass
class Config:
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"
    secret_key: str = DEFAULT_SECRET_KEY


def read_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Load and schema-check a YAML config file."""
    try:
        with open(path) as f:
            data = yaml.load(f, Loader=yaml.SafeLoader) or {}
        validate(instance=data, schema=load_schema()["config"])
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parse error in {path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e.message}") from e
    return data


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> Config:
    """
    Build the configuration.

    Precedence: environment variables, then the YAML file, then defaults.
    The file is FLEET_CONFIG if set, else fleet.yaml in the working
    directory; a missing default file is not an error.
    """
    env = os.environ if environ is None else environ
    explicit = path or env.get("FLEET_CONFIG")
    config_path = Path(explicit or DEFAULT_CONFIG_FILE)

    data: Dict[str, Any] = {}
    if config_path.exists():
        data = read_config_file(config_path)
    elif explicit:
        raise ConfigError(f"Config file not found: {config_path}")

    config = Config(
        api_url=data.get("apiUrl", DEFAULT_API_URL),
        timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
        log_level=data.get("logLevel", "INFO"),
        secret_key=data.get("secretKey", DEFAULT_SECRET_KEY),
    )

    if env.get("FLEET_API_URL"):
        config.api_url = env["FLEET_API_URL"]
    if env.get("FLEET_API_TIMEOUT"):
        try:
            config.timeout = float(env["FLEET_API_TIMEOUT"])
        except ValueError:
            raise ConfigError(f"Invalid FLEET_API_TIMEOUT: {env['FLEET_API_TIMEOUT']!r}")
    if env.get("FLEET_LOG_LEVEL"):
        config.log_level = env["FLEET_LOG_LEVEL"].upper()
    if env.get("SECRET_KEY"):
        config.secret_key = env["SECRET_KEY"]

    return config


def setup_logging(level: str) -> None:
    """Send log output to stderr at the configured level."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
