"""SNS client construction with session handling.

This module builds the boto3 session and SNS client shared by every
component of one notification gateway.
"""

from typing import Any, Optional
import logging
import boto3

from .config import GatewayConfig


logger = logging.getLogger(__name__)


class AWSClientManager:
    """Builds and caches the SNS client for one gateway configuration.

    The configuration is validated by the caller before this class is
    instantiated; nothing here talks to the network until the client is
    used.
    """

    def __init__(self, config: GatewayConfig) -> None:
        """Initialize AWS client manager.

        Args:
            config: Validated gateway configuration
        """
        self._config = config
        self._session: Optional[boto3.Session] = None
        self._client: Optional[Any] = None

    def _get_session(self) -> boto3.Session:
        """Get or create boto3 session.

        Returns:
            boto3 session bound to the configured credentials and region
        """
        if self._session is None:
            self._session = boto3.Session(
                aws_access_key_id=self._config.access_key_id,
                aws_secret_access_key=self._config.secret_access_key,
                region_name=self._config.region,
            )
        return self._session

    def get_client(self) -> Any:
        """Get the SNS client, creating it on first use.

        Returns:
            Configured boto3 SNS client
        """
        if self._client is None:
            session = self._get_session()
            self._client = session.client(
                "sns",
                region_name=self._config.region,
                api_version=self._config.api_version,
            )
            logger.debug(f"Created SNS client for region {self._config.region}")

        return self._client
