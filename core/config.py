"""Configuration models and loading."""

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

CONFIG_DIR = Path.home() / ".config" / "storefront-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"

# Overrides upstream.base_url when set
BASE_URL_ENV = "STOREFRONT_API_URL"
DEFAULT_BASE_URL = "https://stallion.nishree.com/api"


class ProxySettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 3000


class UpstreamSettings(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0


class ImageSettings(BaseModel):
    user_agent: str = "Mozilla/5.0"
    cache_max_age: int = 3600
    timeout: float = 30.0


class DiagnosticsSettings(BaseModel):
    body_log_method: str = "PUT"
    body_log_path_fragment: str = "parties"


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    images: ImageSettings = Field(default_factory=ImageSettings)
    diagnostics: DiagnosticsSettings = Field(default_factory=DiagnosticsSettings)


def load_config(config_file: Path = CONFIG_FILE) -> Config:
    """Load configuration from JSON file, creating default if needed."""
    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config = Config()
        config_file.write_text(config.model_dump_json(indent=2))
        return apply_env_overrides(config)

    try:
        data = json.loads(config_file.read_text())
        config = Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = config_file.with_suffix(".json.bak")
        config_file.rename(backup)
        config = Config()
        config_file.write_text(config.model_dump_json(indent=2))
    return apply_env_overrides(config)


def apply_env_overrides(config: Config, environ: dict[str, str] | None = None) -> Config:
    """Return a copy of config with the upstream URL taken from the environment."""
    env = os.environ if environ is None else environ
    base_url = env.get(BASE_URL_ENV, "").strip()
    if not base_url:
        return config
    upstream = config.upstream.model_copy(update={"base_url": base_url})
    return config.model_copy(update={"upstream": upstream})
