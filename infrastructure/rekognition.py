"""
AWS Rekognition client factory.
"""

from typing import Optional

import boto3

from core.config import settings
from core.logging import get_logger

logger = get_logger(__name__)

_rekognition_client = None


def create_rekognition_client(
    region: str = None,
    access_key_id: Optional[str] = None,
    secret_access_key: Optional[str] = None
):
    """
    Create a boto3 Rekognition client.

    Explicit credentials win; otherwise boto3's default chain
    (env, shared config, instance role) is used.
    """
    kwargs = {"region_name": region or settings.aws_region}
    access_key_id = access_key_id or settings.aws_access_key_id
    secret_access_key = secret_access_key or settings.aws_secret_access_key
    if access_key_id and secret_access_key:
        kwargs["aws_access_key_id"] = access_key_id
        kwargs["aws_secret_access_key"] = secret_access_key

    client = boto3.client("rekognition", **kwargs)
    logger.info(f"Rekognition client initialized (region={kwargs['region_name']})")
    return client


def get_rekognition_client():
    """Get singleton Rekognition client."""
    global _rekognition_client
    if _rekognition_client is None:
        _rekognition_client = create_rekognition_client()
    return _rekognition_client
