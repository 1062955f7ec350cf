"""
CommuteLog configuration module
Handles JSON/YAML configuration files and remote config URLs
"""

from .loader import ConfigLoader, ConfigLoaderError
from .models import AwsConfig, CommuteLogConfig, GoogleConfig, LocationsConfig

__all__ = [
    "AwsConfig",
    "CommuteLogConfig",
    "GoogleConfig",
    "LocationsConfig",
    "ConfigLoader",
    "ConfigLoaderError",
]
