"""Tests for batch payload assembly and response classification."""

import uuid
from unittest.mock import MagicMock

import pytest

from adcortex.batch import BatchStatus, BatchSubmitter
from adcortex.exceptions import TransportError, ValidationError
from adcortex.transport import AdcortexTransport
from adcortex.types import Message, Role


@pytest.fixture
def transport():
    return MagicMock(spec=AdcortexTransport)


@pytest.fixture
def submitter(session_info, transport):
    return BatchSubmitter(session_info, transport)


@pytest.fixture
def messages():
    return (
        Message(role=Role.USER, content="I need a new laptop", timestamp=1.0),
        Message(role=Role.AI, content="What will you use it for?", timestamp=2.0),
    )


class TestBuildPayload:
    """Test BatchSubmitter.build_payload."""

    def test_payload_shape(self, submitter, messages, session_data):
        payload = submitter.build_payload(messages)

        assert set(payload) == {"RGUID", "session_info", "user_data", "messages", "platform"}
        assert payload["session_info"] == {
            "session_id": "session-123",
            "character_name": "Alex",
            "character_metadata": {"description": "Friendly and humorous assistant"},
        }
        assert payload["user_data"] == session_data["user_info"]
        assert payload["platform"] == {"name": "ChatBotX", "version": "1.0.2"}
        assert payload["messages"] == [
            {"role": "user", "content": "I need a new laptop", "timestamp": 1.0},
            {"role": "ai", "content": "What will you use it for?", "timestamp": 2.0},
        ]

    def test_request_id_is_uuid(self, submitter, messages):
        payload = submitter.build_payload(messages)
        assert uuid.UUID(payload["RGUID"])

    def test_request_id_unique_per_request(self, submitter, messages):
        ids = {submitter.build_payload(messages)["RGUID"] for _ in range(20)}
        assert len(ids) == 20


class TestParseResponse:
    """Test BatchSubmitter.parse_response."""

    def test_ad(self, submitter, ad_data):
        result = submitter.parse_response({"ads": [ad_data]}, submitted=2)
        assert result.status == BatchStatus.AD
        assert result.ad.ad_title == "Laptop"
        assert result.submitted == 2

    def test_first_ad_wins(self, submitter, ad_data):
        second = dict(ad_data, ad_title="Phone")
        result = submitter.parse_response({"ads": [ad_data, second]}, submitted=1)
        assert result.ad.ad_title == "Laptop"

    def test_empty(self, submitter):
        result = submitter.parse_response({"ads": []}, submitted=1)
        assert result.status == BatchStatus.EMPTY
        assert result.ad is None
        assert result.error is None

    def test_malformed(self, submitter, ad_data):
        bad = dict(ad_data)
        del bad["ad_description"]
        result = submitter.parse_response({"ads": [bad]}, submitted=1)
        assert result.status == BatchStatus.MALFORMED
        assert result.ad is None
        assert "ad_description" in result.error


class TestSubmit:
    """Test async and blocking submission."""

    @pytest.mark.asyncio
    async def test_asubmit(self, submitter, transport, messages, ad_data):
        transport.apost.return_value = {"ads": [ad_data]}

        result = await submitter.asubmit(messages)

        assert result.status == BatchStatus.AD
        payload = transport.apost.call_args.args[0]
        assert len(payload["messages"]) == 2

    @pytest.mark.asyncio
    async def test_asubmit_transport_error_propagates(self, submitter, transport, messages):
        transport.apost.side_effect = TransportError("connection refused")

        with pytest.raises(TransportError):
            await submitter.asubmit(messages)

    @pytest.mark.asyncio
    async def test_asubmit_non_json_body_is_malformed(self, submitter, transport, messages):
        transport.apost.side_effect = ValidationError("response body is not JSON")

        result = await submitter.asubmit(messages)

        assert result.status == BatchStatus.MALFORMED

    @pytest.mark.asyncio
    async def test_asubmit_empty_batch(self, submitter):
        with pytest.raises(ValueError):
            await submitter.asubmit(())

    def test_submit(self, session_info, messages):
        transport = MagicMock(spec=AdcortexTransport)
        transport.post.return_value = {"ads": []}
        submitter = BatchSubmitter(session_info, transport)

        result = submitter.submit(messages)

        assert result.status == BatchStatus.EMPTY
        transport.post.assert_called_once()
