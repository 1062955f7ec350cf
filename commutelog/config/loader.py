"""
Configuration loader for CommuteLog
Reads config from a local JSON/YAML file or from a remote URL
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import httpx
import yaml
from pydantic import ValidationError

from commutelog.core.errors import ConfigurationError

from .models import CommuteLogConfig, ConfigFormat

REMOTE_CONFIG_ENV = "REMOTE_CONFIG"
CONFIG_PATH_ENV = "COMMUTELOG_CONFIG"
DEFAULT_CONFIG_FILE = "config.json"

logger = logging.getLogger(__name__)


class ConfigLoaderError(ConfigurationError):
    """Configuration could not be read or validated"""
    pass


class ConfigLoader:
    """
    Loads CommuteLogConfig for a run

    A remote URL wins over a local file. Both can come from the environment:
    REMOTE_CONFIG for the URL, COMMUTELOG_CONFIG for the file path.
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        remote_url: Optional[str] = None,
        timeout: int = 30
    ):
        self.remote_url = remote_url or os.getenv(REMOTE_CONFIG_ENV) or None
        self.config_path = Path(config_path or os.getenv(CONFIG_PATH_ENV) or DEFAULT_CONFIG_FILE)
        self.timeout = timeout

    @property
    def source(self) -> str:
        """Where the configuration will be read from"""
        return self.remote_url or str(self.config_path)

    def load(self) -> CommuteLogConfig:
        """
        Load and validate configuration

        Returns:
            CommuteLogConfig instance

        Raises:
            ConfigLoaderError: If the source cannot be read or is invalid
        """
        if self.remote_url:
            data = self.load_remote(self.remote_url)
        else:
            data = self.load_file(self.config_path)

        config = self.parse(data)
        logger.debug(f"Loaded configuration from {self.source}")
        return config

    def load_remote(self, url: str) -> Dict[str, Any]:
        """Fetch configuration document from a URL"""
        try:
            response = httpx.get(url, timeout=self.timeout, follow_redirects=True)
        except httpx.HTTPError as e:
            raise ConfigLoaderError(f"Could not retrieve remote config from {url}: {e}")

        if response.status_code != 200:
            raise ConfigLoaderError(
                f"Could not retrieve remote config from {url}: HTTP {response.status_code}"
            )

        try:
            if url.split("?", 1)[0].lower().endswith((".yaml", ".yml")):
                data = yaml.safe_load(response.text) or {}
            else:
                data = response.json()
        except yaml.YAMLError as e:
            raise ConfigLoaderError(f"Invalid YAML in remote config: {e}")
        except json.JSONDecodeError as e:
            raise ConfigLoaderError(f"Invalid JSON in remote config: {e}")

        if not isinstance(data, dict):
            raise ConfigLoaderError("Remote config must be a JSON object")
        return data

    @staticmethod
    def detect_format(file_path: Path) -> ConfigFormat:
        """Detect configuration file format from extension"""
        suffix = file_path.suffix.lower()

        if suffix in ['.yaml', '.yml']:
            return ConfigFormat.YAML
        elif suffix == '.json':
            return ConfigFormat.JSON
        else:
            raise ConfigLoaderError(f"Unsupported file format: {suffix}")

    @staticmethod
    def load_file(file_path: Path) -> Dict[str, Any]:
        """Load configuration file content"""
        if not file_path.exists():
            raise ConfigLoaderError(f"Configuration file not found: {file_path}")

        format_type = ConfigLoader.detect_format(file_path)

        try:
            content = file_path.read_text(encoding='utf-8')

            if format_type == ConfigFormat.YAML:
                data = yaml.safe_load(content) or {}
            else:
                data = json.loads(content)

        except yaml.YAMLError as e:
            raise ConfigLoaderError(f"Invalid YAML syntax: {e}")
        except json.JSONDecodeError as e:
            raise ConfigLoaderError(f"Invalid JSON syntax: {e}")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigLoaderError(f"Error reading file: {e}")

        if not isinstance(data, dict):
            raise ConfigLoaderError(f"Configuration must be a mapping: {file_path}")
        return data

    @staticmethod
    def parse(data: Dict[str, Any]) -> CommuteLogConfig:
        """Validate raw configuration data"""
        try:
            return CommuteLogConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigLoaderError(f"Invalid configuration: {e}")
