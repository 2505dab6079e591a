"""
Configuration management for runlens
"""

import os
from pathlib import Path
from typing import Any, Optional
import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class StoreConfig(BaseModel):
    """Record store (Supabase) settings"""
    url: str = Field(default_factory=lambda: os.getenv("SUPABASE_URL", ""))
    anon_key: str = Field(default_factory=lambda: os.getenv("SUPABASE_ANON_KEY", ""))
    training_table: str = "training_logs"
    weekly_view: str = "weekly_training_stats"
    page_size: int = Field(default=1000, ge=1)

    @property
    def configured(self) -> bool:
        return bool(self.url and self.anon_key)


class RefreshConfig(BaseModel):
    """Snapshot polling settings"""
    interval_seconds: int = Field(default=30, ge=1)
    best_runs_limit: int = Field(default=5, ge=0)


class LoggingConfig(BaseModel):
    """Logging settings"""
    level: str = "INFO"
    to_file: bool = False
    file_name: str = "runlens.log"


class APIConfig(BaseModel):
    """HTTP server settings"""
    host: str = "127.0.0.1"
    port: int = 8430
    refresh_on_startup: bool = True


class Config(BaseSettings):
    """Main configuration class"""

    # Data directory
    data_dir: Path = Path("~/runlens_data").expanduser()

    # Sub-configurations
    store: StoreConfig = Field(default_factory=StoreConfig)
    refresh: RefreshConfig = Field(default_factory=RefreshConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    api: APIConfig = Field(default_factory=APIConfig)

    class Config:
        env_prefix = "RUNLENS_"
        env_nested_delimiter = "__"

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load configuration from YAML file"""
        if config_path is None:
            raw = os.getenv("RUNLENS_SETTINGS_PATH")
            if raw:
                config_path = Path(raw).expanduser()
            else:
                config_path = Path("~/runlens_data/config/settings.yaml").expanduser()

        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f)
                return cls(**data) if data else cls()

        return cls()

    def save(self, config_path: Optional[Path] = None):
        """Save configuration to YAML file"""
        if config_path is None:
            config_path = self.data_dir / "config" / "settings.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False)

    def get(self, key: str, default: Any = None) -> Any:
        """Get nested configuration value using dot notation"""
        keys = key.split(".")
        value = self

        for k in keys:
            if hasattr(value, k):
                value = getattr(value, k)
            elif isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value


# Default configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get global configuration instance"""
    global _config
    if _config is None:
        _config = Config.load()
    return _config


def reload_config():
    """Reload configuration from disk"""
    global _config
    _config = Config.load()
    return _config
