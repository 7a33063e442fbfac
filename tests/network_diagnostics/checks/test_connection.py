"""
Unit tests for the connection helpers.

These tests exercise open_stream(), measure_connect() and close_stream() on
every exit path (success, refusal, timeout, error inside the block) and check
that the stream is released on each of them.

The tests follow the Arrange-Act-Assert (AAA) pattern.
"""

import asyncio
import socket
from typing import List
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from network_diagnostics.checks.connection import (
    close_stream,
    describe_error,
    elapsed_ms,
    is_timeout,
    measure_connect,
    open_stream,
)

LOOPBACK = "127.0.0.1"


def _mock_writer() -> MagicMock:
    writer = MagicMock()
    writer.wait_closed = AsyncMock()
    return writer


class TestOpenStream:
    """Tests for the open_stream context manager."""

    @pytest.mark.asyncio
    async def test_open_stream_should_close_real_stream_after_block(self, open_port: int) -> None:
        # Arrange
        real_open_connection = asyncio.open_connection
        writers: List[asyncio.StreamWriter] = []

        async def capturing_open_connection(*args, **kwargs):
            reader, writer = await real_open_connection(*args, **kwargs)
            writers.append(writer)
            return reader, writer

        # Act
        with patch("asyncio.open_connection", new=capturing_open_connection):
            async with open_stream(LOOPBACK, open_port, 1000) as writer:
                assert not writer.is_closing()

        # Assert
        assert len(writers) == 1
        assert writers[0].is_closing()

    @pytest.mark.asyncio
    async def test_open_stream_should_close_stream_when_block_raises(self) -> None:
        # Arrange
        writer = _mock_writer()
        open_connection = AsyncMock(return_value=(MagicMock(), writer))

        # Act
        with patch("asyncio.open_connection", new=open_connection):
            with pytest.raises(RuntimeError, match="inside block"):
                async with open_stream("example.com", 80, 1000):
                    raise RuntimeError("inside block")

        # Assert
        writer.close.assert_called_once()
        writer.wait_closed.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_open_stream_should_pass_ssl_context_and_server_name(self) -> None:
        # Arrange
        writer = _mock_writer()
        open_connection = AsyncMock(return_value=(MagicMock(), writer))
        ssl_context = MagicMock()

        # Act
        with patch("asyncio.open_connection", new=open_connection):
            async with open_stream("example.com", 443, 1000, ssl_context=ssl_context):
                pass

        # Assert
        open_connection.assert_awaited_once_with(
            "example.com", 443, ssl=ssl_context, server_hostname="example.com"
        )

    @pytest.mark.asyncio
    async def test_open_stream_should_cancel_pending_connect_on_timeout(self) -> None:
        # Arrange
        cancelled = asyncio.Event()

        async def hanging_open_connection(*args, **kwargs):
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.set()
                raise

        # Act
        with patch("asyncio.open_connection", new=hanging_open_connection):
            with pytest.raises(asyncio.TimeoutError):
                async with open_stream("198.51.100.1", 80, 50):
                    pass

        # Assert
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_open_stream_should_raise_connection_refused_for_closed_port(
        self, closed_port: int
    ) -> None:
        # Act & Assert
        with pytest.raises(ConnectionRefusedError):
            async with open_stream(LOOPBACK, closed_port, 1000):
                pass


class TestMeasureConnect:
    """Tests for measure_connect."""

    @pytest.mark.asyncio
    async def test_measure_connect_should_return_latency_for_open_port(
        self, open_port: int
    ) -> None:
        # Act
        latency_ms = await measure_connect(LOOPBACK, open_port, 1000)

        # Assert
        assert isinstance(latency_ms, int)
        assert 0 <= latency_ms < 1000

    @pytest.mark.asyncio
    async def test_measure_connect_should_raise_for_closed_port(self, closed_port: int) -> None:
        # Act & Assert
        with pytest.raises(OSError):
            await measure_connect(LOOPBACK, closed_port, 1000)


class TestCloseStream:
    """Tests for close_stream."""

    @pytest.mark.asyncio
    async def test_close_stream_should_abort_transport_when_close_hangs(self) -> None:
        # Arrange
        writer = MagicMock()

        async def hanging_wait_closed() -> None:
            await asyncio.Event().wait()

        writer.wait_closed = hanging_wait_closed

        # Act
        with patch("network_diagnostics.checks.connection.CLOSE_TIMEOUT", 0.05):
            await close_stream(writer)

        # Assert
        writer.close.assert_called_once()
        writer.transport.abort.assert_called_once()

    @pytest.mark.asyncio
    async def test_close_stream_should_not_raise_on_close_error(self) -> None:
        # Arrange
        writer = MagicMock()
        writer.wait_closed = AsyncMock(side_effect=ConnectionResetError("reset by peer"))

        # Act
        await close_stream(writer)

        # Assert
        writer.close.assert_called_once()
        writer.transport.abort.assert_not_called()


class TestErrorHelpers:
    """Tests for the error description helpers."""

    def test_describe_error_should_render_timeouts_as_timeout(self) -> None:
        assert describe_error(asyncio.TimeoutError()) == "Timeout"
        assert describe_error(TimeoutError("timed out")) == "Timeout"

    def test_describe_error_should_keep_refusal_distinguishable(self) -> None:
        # Arrange
        error = ConnectionRefusedError(111, "Connection refused")

        # Act
        description = describe_error(error)

        # Assert
        assert description == "ConnectionRefusedError: [Errno 111] Connection refused"

    def test_describe_error_should_name_resolution_failures(self) -> None:
        description = describe_error(socket.gaierror(-2, "Name or service not known"))
        assert description.startswith("gaierror: ")

    def test_describe_error_should_fall_back_to_class_name_without_message(self) -> None:
        assert describe_error(OSError()) == "OSError"

    def test_is_timeout_should_reject_other_errors(self) -> None:
        assert not is_timeout(ConnectionRefusedError())

    def test_elapsed_ms_should_round_to_whole_milliseconds(self) -> None:
        assert elapsed_ms(10.0, 10.0126) == 13
