"""
Batch submission of queued messages to the matching service.
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import ValidationError
from .transport import AdcortexTransport
from .types import Ad, AdResponse, Message, SessionInfo

logger = logging.getLogger(__name__)


class BatchStatus(str, Enum):
    """Outcome of a batch that reached the server."""

    AD = "ad"  # at least one ad returned
    EMPTY = "empty"  # valid response, no ads
    MALFORMED = "malformed"  # response failed validation


@dataclass
class BatchResult:
    """Result of one batch submission."""

    status: BatchStatus
    submitted: int
    ad: Ad | None = None
    error: str | None = None


class BatchSubmitter:
    """
    Builds batch payloads and classifies the server's answer.

    Transport failures propagate as TransportError. A response that reaches
    us but fails validation comes back as ``BatchStatus.MALFORMED`` rather
    than raising, so callers can tell reliability problems apart from an
    ordinary "no ad" answer.
    """

    def __init__(self, session_info: SessionInfo, transport: AdcortexTransport):
        self.session_info = session_info
        self.transport = transport

    def build_payload(self, messages: tuple[Message, ...] | list[Message]) -> dict[str, Any]:
        """Assemble the request body for a batch of messages."""
        session = self.session_info
        return {
            "RGUID": str(uuid.uuid4()),
            "session_info": {
                "session_id": session.session_id,
                "character_name": session.character_name,
                "character_metadata": dict(session.character_metadata),
            },
            "user_data": session.user_info.to_dict(),
            "messages": [m.to_dict() for m in messages],
            "platform": session.platform.to_dict(),
        }

    def submit(self, messages: tuple[Message, ...] | list[Message]) -> BatchResult:
        """Send a batch using blocking I/O."""
        payload = self._prepare(messages)
        try:
            body = self.transport.post(payload)
        except ValidationError as e:
            return self._malformed(len(messages), e)
        return self.parse_response(body, len(messages))

    async def asubmit(self, messages: tuple[Message, ...] | list[Message]) -> BatchResult:
        """Send a batch asynchronously."""
        payload = self._prepare(messages)
        try:
            body = await self.transport.apost(payload)
        except ValidationError as e:
            return self._malformed(len(messages), e)
        return self.parse_response(body, len(messages))

    def parse_response(self, body: Any, submitted: int) -> BatchResult:
        """Validate a response body and pick the first ad, if any."""
        try:
            response = AdResponse.from_dict(body)
        except ValidationError as e:
            return self._malformed(submitted, e)

        if not response.ads:
            return BatchResult(status=BatchStatus.EMPTY, submitted=submitted)

        ad = response.ads[0]
        return BatchResult(status=BatchStatus.AD, submitted=submitted, ad=ad)

    def _prepare(self, messages: tuple[Message, ...] | list[Message]) -> dict[str, Any]:
        if not messages:
            raise ValueError("cannot submit an empty batch")
        payload = self.build_payload(messages)
        logger.debug(f"Submitting batch {payload['RGUID']} with {len(messages)} message(s)")
        return payload

    def _malformed(self, submitted: int, error: ValidationError) -> BatchResult:
        return BatchResult(status=BatchStatus.MALFORMED, submitted=submitted, error=str(error))
