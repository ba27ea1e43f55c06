"""Unit tests for src.core.context module."""

import asyncio
import uuid

import pytest

from src.core.context import (
    RequestContext,
    generate_correlation_id,
    generate_request_id,
)


@pytest.mark.unit
class TestRequestContext:
    """Test cases for RequestContext."""

    def test_set_get_clear(self) -> None:
        """Test the correlation ID round trip within one context."""
        assert RequestContext.get_correlation_id() is None

        RequestContext.set_correlation_id("abc")
        assert RequestContext.get_correlation_id() == "abc"

        RequestContext.clear()
        assert RequestContext.get_correlation_id() is None

    async def test_isolated_between_tasks(self) -> None:
        """Test concurrent tasks do not see each other's correlation IDs."""

        async def handle(correlation_id: str) -> str | None:
            RequestContext.set_correlation_id(correlation_id)
            await asyncio.sleep(0)
            return RequestContext.get_correlation_id()

        results = await asyncio.gather(handle("one"), handle("two"))

        assert results == ["one", "two"]


@pytest.mark.unit
class TestIdGeneration:
    """Test cases for ID generators."""

    def test_correlation_id_is_uuid4(self) -> None:
        """Test correlation IDs are UUID4 strings."""
        assert uuid.UUID(generate_correlation_id()).version == 4

    def test_request_id_is_prefixed(self) -> None:
        """Test request IDs carry the req- prefix."""
        request_id = generate_request_id()

        assert request_id.startswith("req-")
        assert uuid.UUID(request_id.removeprefix("req-")).version == 4
