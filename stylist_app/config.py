"""Configuration helpers for the DressUp stylist engine."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
DEFAULT_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_STORE_PATH = "data/dressup_state.json"


@dataclass
class StylistConfig:
    """Configuration values for the stylist engine.

    Only the weather collaborator and the local store need real settings; the
    recommendation core itself is configured through a couple of limits.
    """

    geocoding_url: str = DEFAULT_GEOCODING_URL
    forecast_url: str = DEFAULT_FORECAST_URL
    weather_timeout_seconds: float = 5.0
    forecast_language: str = "en"
    look_limit: int = 5
    pool_multiplier: int = 2
    store_path: str = DEFAULT_STORE_PATH
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "StylistConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default. Environment variables win over file values.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("STYLIST_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        return cls(
            geocoding_url=str(get_value("geocoding_url") or DEFAULT_GEOCODING_URL),
            forecast_url=str(get_value("forecast_url") or DEFAULT_FORECAST_URL),
            weather_timeout_seconds=cls._as_float(get_value("weather_timeout_seconds"), 5.0),
            forecast_language=str(get_value("forecast_language") or "en"),
            look_limit=cls._as_int(get_value("look_limit"), 5),
            pool_multiplier=cls._as_int(get_value("pool_multiplier"), 2),
            store_path=str(get_value("store_path") or DEFAULT_STORE_PATH),
            environment=env_name,
        )

    @staticmethod
    def _as_int(raw: Optional[str], default: int) -> int:
        try:
            value = int(str(raw))
        except (TypeError, ValueError):
            return default
        return value if value > 0 else default

    @staticmethod
    def _as_float(raw: Optional[str], default: float) -> float:
        try:
            value = float(str(raw))
        except (TypeError, ValueError):
            return default
        return value if value > 0 else default

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal ``key: value`` YAML file without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
