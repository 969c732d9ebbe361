"""
Configuration Loader - Load YAML configuration files and assistant settings
"""

import logging
import os
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional, List
from functools import lru_cache

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent

SUPPORTED_PROVIDERS = ("deepl", "bedrock")


class ConfigLoader:
    """
    Loader for YAML configuration files.

    Usage:
        config = ConfigLoader()
        settings = config.load("settings")
        models = config.load("models")
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize the config loader.

        Args:
            config_dir: Path to config directory.
                        Defaults to config/ at project root.
        """
        if config_dir is None:
            self.config_dir = PROJECT_ROOT / "config"
        else:
            self.config_dir = Path(config_dir)

    @lru_cache(maxsize=32)
    def load(self, name: str) -> Dict[str, Any]:
        """
        Load a configuration file by name.

        Args:
            name: Config file name (without .yaml extension)

        Returns:
            Parsed configuration dict

        Raises:
            FileNotFoundError: If config file not found
        """
        candidates = [
            self.config_dir / f"{name}.yaml",
            self.config_dir / f"{name}.yml",
            self.config_dir / name,
        ]

        for path in candidates:
            if path.exists():
                with open(path, "r", encoding="utf-8") as f:
                    return yaml.safe_load(f) or {}

        raise FileNotFoundError(
            f"Config file '{name}' not found in {self.config_dir}"
        )

    def load_optional(self, name: str) -> Dict[str, Any]:
        """Load a config file, returning {} when it does not exist"""
        try:
            return self.load(name)
        except FileNotFoundError:
            logger.debug(f"Config '{name}' not found in {self.config_dir}, using defaults")
            return {}

    def clear_cache(self):
        """Clear the config cache"""
        self.load.cache_clear()


@dataclass
class AssistantSettings:
    """Runtime settings for the translation assistant"""
    provider: str = "deepl"                         # deepl | bedrock
    timeout_seconds: float = 30.0                   # per outbound provider call
    formality_languages: List[str] = field(default_factory=lambda: ["ko"])
    enable_generative_helper: bool = False          # Bedrock helper for the deepl path
    profiles_path: Path = PROJECT_ROOT / "data" / "profiles.json"
    deepl_api_key: str = ""
    deepl_server_url: Optional[str] = None
    aws_region: Optional[str] = None

    def __post_init__(self):
        self.provider = (self.provider or "deepl").lower()
        if self.provider not in SUPPORTED_PROVIDERS:
            raise ValueError(
                f"Unsupported provider: {self.provider}. Available: {list(SUPPORTED_PROVIDERS)}"
            )
        self.profiles_path = Path(self.profiles_path)
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

    @property
    def has_api_key(self) -> bool:
        if self.provider == "deepl":
            return bool(self.deepl_api_key)
        # Bedrock relies on the AWS credential chain
        return True


def load_settings(
    config_dir: Optional[str] = None,
    environ: Optional[Dict[str, str]] = None
) -> AssistantSettings:
    """
    Build AssistantSettings from config/settings.yaml and environment overrides.

    Environment:
        HANBRIDGE_PROVIDER, HANBRIDGE_PROFILES_PATH, HANBRIDGE_TIMEOUT_SECONDS,
        DEEPL_API_KEY, DEEPL_SERVER_URL, AWS_REGION
    """
    env = os.environ if environ is None else environ
    loader = get_config_loader() if config_dir is None else ConfigLoader(config_dir)
    raw = loader.load_optional("settings")

    deepl_cfg = raw.get("deepl", {}) or {}
    values: Dict[str, Any] = {
        "provider": env.get("HANBRIDGE_PROVIDER", raw.get("provider", "deepl")),
        "timeout_seconds": float(env.get("HANBRIDGE_TIMEOUT_SECONDS", raw.get("timeout_seconds", 30.0))),
        "formality_languages": raw.get("formality_languages", ["ko"]),
        "enable_generative_helper": bool(raw.get("enable_generative_helper", False)),
        "deepl_api_key": env.get("DEEPL_API_KEY", ""),
        "deepl_server_url": env.get("DEEPL_SERVER_URL", deepl_cfg.get("server_url")),
        "aws_region": env.get("AWS_REGION", raw.get("aws_region")),
    }

    profiles_path = env.get("HANBRIDGE_PROFILES_PATH", raw.get("profiles_path"))
    if profiles_path:
        path = Path(profiles_path)
        values["profiles_path"] = path if path.is_absolute() else PROJECT_ROOT / path

    return AssistantSettings(**values)


# Singleton instance
_default_loader: Optional[ConfigLoader] = None


def get_config_loader(config_dir: Optional[str] = None) -> ConfigLoader:
    """Get or create the default config loader singleton"""
    global _default_loader
    if _default_loader is None:
        _default_loader = ConfigLoader(config_dir)
    return _default_loader
