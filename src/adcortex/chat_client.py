"""
Chat clients for the ADCortex API with queued, batched message processing.

Both clients keep a bounded queue of recent messages. A user message
triggers one batch request carrying everything queued so far; assistant
messages are only queued. Repeated failures open a circuit breaker that
blocks further requests until its cooldown has passed.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from .ad_cache import DEFAULT_CONTEXT_TEMPLATE, AdCache, format_context
from .batch import BatchResult, BatchStatus, BatchSubmitter
from .config import AD_FETCH_URL, ClientConfig
from .exceptions import TransportError, TransportTimeoutError
from .message_queue import MessageQueue
from .state import CircuitBreaker, ClientState, utc_now
from .transport import AdcortexTransport
from .types import Ad, Message, Role, SessionInfo

logger = logging.getLogger(__name__)


class _BaseChatClient:
    """Queue, circuit breaker and ad cache shared by the sync and async clients."""

    default_timeout: float = 10.0

    def __init__(
        self,
        session_info: SessionInfo,
        context_template: str = DEFAULT_CONTEXT_TEMPLATE,
        api_key: str | None = None,
        timeout: float | None = None,
        disable_logging: bool = False,
        max_queue_size: int = 100,
        circuit_breaker_threshold: int = 5,
        circuit_breaker_timeout: float = 120,
        base_url: str = AD_FETCH_URL,
        retries: int = 3,
        clock: Callable[[], datetime] = utc_now,
        config: ClientConfig | None = None,
    ):
        """
        Args:
            session_info: Session details sent with every batch
            context_template: Template used by create_context
            api_key: API key; falls back to the ADCORTEX_API_KEY environment variable
            timeout: Request timeout in seconds
            disable_logging: Suppress log output from this client
            max_queue_size: Maximum number of queued messages
            circuit_breaker_threshold: Errors before the circuit opens
            circuit_breaker_timeout: Seconds before an open circuit resets
            base_url: Ad matching endpoint
            retries: Connection retries per request
            clock: Time source for the circuit breaker
            config: Use these settings instead of the keyword arguments above

        Raises:
            ConfigurationError: no API key is available or a setting is invalid
        """
        if config is None:
            config = ClientConfig(
                api_key=api_key,
                base_url=base_url,
                context_template=context_template,
                timeout_seconds=timeout,
                retries=retries,
                disable_logging=disable_logging,
                max_queue_size=max_queue_size,
                circuit_breaker_threshold=circuit_breaker_threshold,
                circuit_breaker_timeout=circuit_breaker_timeout,
            )
        config.validate()

        # Resolved once; later changes to the environment are not picked up
        api_key = config.resolve_api_key()

        self._session_info = session_info
        self._context_template = config.context_template
        self._disable_logging = config.disable_logging
        self._transport = AdcortexTransport(
            api_key=api_key,
            url=config.base_url,
            timeout_seconds=(
                self.default_timeout if config.timeout_seconds is None else config.timeout_seconds
            ),
            retries=config.retries,
        )
        self._submitter = BatchSubmitter(session_info, self._transport)
        self._queue = MessageQueue(config.max_queue_size)
        self._ad_cache = AdCache()
        self._state = ClientState.IDLE
        self._circuit_breaker = CircuitBreaker(
            threshold=config.circuit_breaker_threshold,
            timeout=config.circuit_breaker_timeout,
            disable_logging=config.disable_logging,
            clock=clock,
        )

    @classmethod
    def from_config(
        cls,
        session_info: SessionInfo,
        config: ClientConfig,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Build a client from a ClientConfig."""
        return cls(session_info, config=config, clock=clock)

    def _log_info(self, message: str) -> None:
        if not self._disable_logging:
            logger.info(message)

    def _log_error(self, message: str) -> None:
        if not self._disable_logging:
            logger.error(message)

    @property
    def latest_ad(self) -> Ad | None:
        """The cached ad, without consuming it."""
        return self._ad_cache.peek()

    @property
    def circuit_breaker(self) -> CircuitBreaker:
        return self._circuit_breaker

    @property
    def queue_size(self) -> int:
        return len(self._queue)

    def _enqueue(self, role: Role | str, content: str) -> Message:
        """Validate and queue a message, dropping the oldest one if full."""
        message = Message.from_dict({"role": role, "content": content})

        if self._queue.enqueue(message):
            self._log_info("Queue full, removed oldest message")
        self._log_info(f"Message queued: {message.role.value} - {content}")
        return message

    def _should_process(self, message: Message) -> bool:
        return (
            self._state == ClientState.IDLE
            and message.role == Role.USER
            and not self._circuit_breaker.is_open()
        )

    def _take_snapshot(self) -> tuple[tuple[Message, ...], int]:
        messages = self._queue.snapshot()
        if messages:
            self._log_info(f"Processing {len(messages)} messages in batch")
        return messages, self._queue.evicted

    def _record_transport_failure(self, error: TransportError) -> None:
        if isinstance(error, TransportTimeoutError):
            self._log_error(f"Batch request timed out: {error}")
        else:
            self._log_error(f"Batch request failed: {error}")
        self._circuit_breaker.record_error()

    def _apply_result(self, result: BatchResult, evicted_before: int) -> None:
        """Commit the submitted messages and update the ad cache."""
        # Messages evicted for capacity while the request was in flight were
        # part of the snapshot and are already gone from the queue.
        evicted_during = self._queue.evicted - evicted_before
        self._queue.commit(max(result.submitted - evicted_during, 0))

        if result.status == BatchStatus.AD:
            self._ad_cache.store(result.ad)
            self._log_info(f"Ad fetched: {result.ad.ad_title}")
        elif result.status == BatchStatus.EMPTY:
            self._log_info("No ads returned")
        else:
            self._log_error(f"Invalid ad response format: {result.error}")
            self._circuit_breaker.record_error()
            self._ad_cache.clear()

    def create_context(self, ad: Ad | None = None) -> str:
        """
        Create a context string for an ad.

        Uses the cached latest ad (without clearing it) when no ad is given.
        Returns an empty string if there is no ad.
        """
        if ad is None:
            ad = self._ad_cache.peek()
        if ad is None:
            return ""
        return format_context(ad, self._context_template)

    def get_latest_ad(self) -> Ad | None:
        """Get the latest ad and clear it from memory."""
        return self._ad_cache.get_latest_and_clear()

    def get_state(self) -> ClientState:
        return self._state

    def is_healthy(self) -> bool:
        """Check if the client is in a healthy state."""
        return not self._circuit_breaker.is_open() and not self._queue.is_full()


class AdcortexChatClient(_BaseChatClient):
    """Chat client using blocking HTTP calls."""

    default_timeout = 5.0

    def __call__(self, role: Role | str, content: str) -> None:
        """
        Add a message to the queue and process the queue if it was a user message.

        Raises:
            ValidationError: role or content is invalid; nothing is queued
            TransportError: the batch request failed; messages stay queued
        """
        message = self._enqueue(role, content)
        if not self._should_process(message):
            return

        self._state = ClientState.PROCESSING
        try:
            self._process_queue()
        finally:
            self._state = ClientState.IDLE

    def _process_queue(self) -> None:
        messages, evicted_before = self._take_snapshot()
        if not messages:
            return

        try:
            result = self._submitter.submit(messages)
        except TransportError as e:
            self._record_transport_failure(e)
            raise
        self._apply_result(result, evicted_before)


class AsyncAdcortexChatClient(_BaseChatClient):
    """Chat client for asyncio applications."""

    default_timeout = 10.0

    async def __call__(self, role: Role | str, content: str) -> None:
        """
        Add a message to the queue and process the queue if it was a user message.

        Messages sent while a batch is in flight are queued and go out with
        the next batch.

        Raises:
            ValidationError: role or content is invalid; nothing is queued
            TransportError: the batch request failed; messages stay queued
        """
        message = self._enqueue(role, content)
        if not self._should_process(message):
            return

        self._state = ClientState.PROCESSING
        try:
            await self._process_queue()
        finally:
            self._state = ClientState.IDLE

    async def _process_queue(self) -> None:
        messages, evicted_before = self._take_snapshot()
        if not messages:
            return

        try:
            result = await self._submitter.asubmit(messages)
        except TransportError as e:
            self._record_transport_failure(e)
            raise
        self._apply_result(result, evicted_before)

