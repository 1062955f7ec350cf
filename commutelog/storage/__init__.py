"""
DynamoDB storage for commute records
"""

from .session import create_dynamodb_client, load_auth_file
from .writer import ResultWriter

__all__ = ["ResultWriter", "create_dynamodb_client", "load_auth_file"]
