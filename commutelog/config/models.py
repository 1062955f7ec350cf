"""
Configuration models for CommuteLog
Mirrors the config.json document: google / aws / locations sections
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from commutelog.core.models import DEFAULT_UTC_OFFSET_HOURS


class ConfigFormat(str, Enum):
    """Supported configuration file formats"""

    YAML = "yaml"
    JSON = "json"


class GoogleConfig(BaseModel):
    """Google Maps credentials"""

    key: str = Field(..., min_length=1, description="Distance Matrix API key")


class AwsConfig(BaseModel):
    """DynamoDB target"""

    table: str = Field(..., min_length=1, description="DynamoDB table name")
    region: Optional[str] = Field(None, description="AWS region (SDK default if unset)")


class LocationsConfig(BaseModel):
    """Addresses to measure between"""

    home: List[str] = Field(default_factory=list, description="Home addresses")
    work: List[str] = Field(default_factory=list, description="Work addresses")

    @field_validator('home', 'work')
    def clean_addresses(cls, v):
        """Strip whitespace and drop blank entries"""
        return [address.strip() for address in v if address and address.strip()]

    @property
    def permutations(self) -> int:
        return len(self.home) * len(self.work)


class CommuteLogConfig(BaseModel):
    """Complete configuration for one run"""

    google: GoogleConfig
    aws: AwsConfig
    locations: LocationsConfig = Field(default_factory=LocationsConfig)

    utc_offset_hours: float = Field(
        DEFAULT_UTC_OFFSET_HOURS,
        description="Fixed UTC offset used to decide morning vs. afternoon",
        ge=-14,
        le=14
    )
    language: str = Field("en-EN", description="Language tag sent with each query")
    timeout: int = Field(30, description="HTTP timeout in seconds", ge=1, le=300)
