# printify_check/api/factory.py
"""Factory for creating the configured Processing API client."""

from printify_check.config.schema import PrintifyCheckConfig

from .client import HttpProcessingApi


def create_api_client(config: PrintifyCheckConfig) -> HttpProcessingApi:
    """
    Create the Processing API client from config.

    Args:
        config: Root PrintifyCheckConfig

    Returns:
        HttpProcessingApi pointed at config.api.base_url
    """
    return HttpProcessingApi(
        base_url=config.api.base_url,
        timeout=config.api.timeout,
        upload_timeout=config.api.upload_timeout,
        user_id=config.api.user_id,
    )
