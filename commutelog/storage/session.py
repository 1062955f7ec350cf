"""
DynamoDB client construction
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import boto3

from commutelog.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def load_auth_file(auth_file: Union[str, Path]) -> Dict[str, Any]:
    """
    Read AWS credentials for local runs

    Expected keys: accessKeyId, secretAccessKey, optional sessionToken and region.
    Inside Lambda the attached role is used instead.
    """
    path = Path(auth_file)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Could not read AWS credentials file {path}: {e}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in AWS credentials file {path}: {e}")

    if not isinstance(data, dict) or not data.get("accessKeyId") or not data.get("secretAccessKey"):
        raise ConfigurationError(
            f"AWS credentials file {path} must contain accessKeyId and secretAccessKey"
        )
    return data


def create_dynamodb_client(
    region: Optional[str] = None,
    auth_file: Optional[Union[str, Path]] = None
):
    """DynamoDB client from the default credential chain or an auth file"""
    if auth_file:
        credentials = load_auth_file(auth_file)
        session = boto3.session.Session(
            aws_access_key_id=credentials["accessKeyId"],
            aws_secret_access_key=credentials["secretAccessKey"],
            aws_session_token=credentials.get("sessionToken"),
            region_name=region or credentials.get("region"),
        )
        logger.debug(f"Using AWS credentials from {auth_file}")
    else:
        session = boto3.session.Session(region_name=region)

    return session.client("dynamodb")
