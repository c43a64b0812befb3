"""
Stateless client for one-off ad lookups.

Unlike the chat clients this keeps no queue, cache or circuit breaker: the
caller passes the conversation on every call and handles errors itself.
"""

import logging

from .ad_cache import format_context
from .batch import BatchStatus, BatchSubmitter
from .config import AD_MATCH_URL, ClientConfig
from .exceptions import ValidationError
from .transport import AdcortexTransport
from .types import Ad, Message, SessionInfo

logger = logging.getLogger(__name__)


class AdcortexClient:
    """Fetch an ad for a full conversation in a single request."""

    def __init__(
        self,
        session_info: SessionInfo,
        context_template: str = "",
        api_key: str | None = None,
        timeout: float = 10.0,
        base_url: str = AD_MATCH_URL,
    ):
        config = ClientConfig(
            api_key=api_key,
            base_url=base_url,
            context_template=context_template,
            timeout_seconds=timeout,
        )
        config.validate()
        self.session_info = session_info
        self.context_template = context_template
        self._submitter = BatchSubmitter(
            session_info,
            AdcortexTransport(
                api_key=config.resolve_api_key(),
                url=config.base_url,
                timeout_seconds=config.timeout_seconds,
                retries=config.retries,
            ),
        )

    async def fetch_ad(self, messages: list[Message]) -> Ad | None:
        """
        Fetch the best ad for a conversation.

        Returns:
            The first ad returned, or None if the service had no match

        Raises:
            TransportError: the request failed
            ValidationError: the response did not match the ad response shape
        """
        result = await self._submitter.asubmit(messages)
        if result.status == BatchStatus.MALFORMED:
            raise ValidationError(result.error or "invalid ad response")
        if result.ad is None:
            logger.debug("No ads returned")
        return result.ad

    def generate_context(self, ad: Ad) -> str:
        """Fill the context template with an ad's fields."""
        return format_context(ad, self.context_template)
