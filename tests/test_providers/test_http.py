"""Tests for the shared aiohttp fetch helper."""

import asyncio
import sys
from unittest.mock import AsyncMock, Mock, patch

import aiohttp
import pytest

sys.path.append("src")
from quantleap.providers.errors import (
    DataShapeError,
    FailureCategory,
    ProviderRejectedError,
    TransportError,
)
from quantleap.providers.http import fetch_json


@pytest.fixture
def mock_aiohttp():
    """Mock aiohttp.ClientSession to prevent any real HTTP requests."""

    class MockResponseContext:
        def __init__(self, response):
            self.response = response

        async def __aenter__(self):
            return self.response

        async def __aexit__(self, exc_type, exc_val, exc_tb):
            return None

    class MockSessionContext:
        def __init__(self, session):
            self.session = session

        async def __aenter__(self):
            return self.session

        async def __aexit__(self, exc_type, exc_val, exc_tb):
            return None

    with patch("quantleap.providers.http.aiohttp.ClientSession") as mock_client_session:
        mock_response = AsyncMock()
        mock_response.status = 200
        mock_response.json = AsyncMock(return_value={"c": 3.12})
        mock_response.text = AsyncMock(return_value="OK")

        mock_session = Mock()
        mock_session.get = Mock(return_value=MockResponseContext(mock_response))

        mock_client_session.return_value = MockSessionContext(mock_session)

        yield {
            "session": mock_session,
            "response": mock_response,
            "client_session": mock_client_session,
        }


class TestFetchJson:
    @pytest.mark.asyncio
    async def test_returns_decoded_body(self, mock_aiohttp):
        result = await fetch_json(
            "finnhub", "https://example.com/quote", {"symbol": "AISP"}
        )

        assert result == {"c": 3.12}
        mock_aiohttp["session"].get.assert_called_once_with(
            "https://example.com/quote", params={"symbol": "AISP"}
        )

    @pytest.mark.asyncio
    async def test_session_uses_timeout(self, mock_aiohttp):
        await fetch_json("finnhub", "https://example.com", {}, timeout_seconds=3)

        _, kwargs = mock_aiohttp["client_session"].call_args
        assert kwargs["timeout"].total == 3

    @pytest.mark.asyncio
    async def test_non_2xx_is_rejection(self, mock_aiohttp):
        mock_aiohttp["response"].status = 429
        mock_aiohttp["response"].text = AsyncMock(return_value="Too Many Requests")

        with pytest.raises(ProviderRejectedError) as exc_info:
            await fetch_json("finnhub", "https://example.com", {})

        assert exc_info.value.status == 429
        assert exc_info.value.category == FailureCategory.REJECTED
        assert "Too Many Requests" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_invalid_json_is_data_shape(self, mock_aiohttp):
        mock_aiohttp["response"].json = AsyncMock(side_effect=ValueError("bad json"))

        with pytest.raises(DataShapeError):
            await fetch_json("finnhub", "https://example.com", {})

    @pytest.mark.asyncio
    async def test_client_error_is_transport(self, mock_aiohttp):
        mock_aiohttp["session"].get.side_effect = aiohttp.ClientError("reset")

        with pytest.raises(TransportError) as exc_info:
            await fetch_json("finnhub", "https://example.com", {})

        assert exc_info.value.category == FailureCategory.TRANSPORT

    @pytest.mark.asyncio
    async def test_timeout_is_transport(self, mock_aiohttp):
        mock_aiohttp["session"].get.side_effect = asyncio.TimeoutError()

        with pytest.raises(TransportError):
            await fetch_json("finnhub", "https://example.com", {})

    @pytest.mark.asyncio
    async def test_undecodable_error_page_is_rejection(self, mock_aiohttp):
        body = b"\xff\xfe bad gateway \xc3\x28"

        async def text(encoding=None, errors="strict"):
            return body.decode(encoding or "utf-8", errors)

        mock_aiohttp["response"].status = 502
        mock_aiohttp["response"].text = AsyncMock(side_effect=text)

        with pytest.raises(ProviderRejectedError) as exc_info:
            await fetch_json("finnhub", "https://example.com", {})

        assert exc_info.value.status == 502
        assert "bad gateway" in exc_info.value.message
