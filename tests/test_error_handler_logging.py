from __future__ import annotations

import logging

import pytest

from trade_stream.common.exceptions import TradeFieldFormatError, UndefinedPairIDError
from trade_stream.core.connection.error_handler import (
    RAW_PREVIEW_LIMIT,
    ErrorEvent,
    StreamErrorHandler,
)
from trade_stream.core.types import ErrorCode, ErrorDomain
from tests.factory_builders import build_scope_domain


def test_error_handler_scope_log_extra_has_standard_keys() -> None:
    scope = build_scope_domain()
    handler = StreamErrorHandler(scope=scope)

    payload = handler._scope_log_extra("decode", raw_length=12, trade_id=None)

    assert payload["exchange"] == "poloniex"
    assert payload["channel"] == "trades"
    assert payload["phase"] == "decode"
    assert payload["raw_length"] == 12
    assert "trade_id" not in payload


@pytest.mark.asyncio
async def test_decode_error_is_counted_and_continues_stream() -> None:
    handler = StreamErrorHandler()

    event = await handler.emit_decode_error(UndefinedPairIDError("144"), raw="[144, 1, []]")

    assert event.domain is ErrorDomain.REGISTRY
    assert event.code is ErrorCode.UNDEFINED_PAIR_ID
    assert event.continue_stream is True
    assert event.context == {"raw_preview": "[144, 1, []]", "raw_length": 12}
    assert handler.error_counts[ErrorCode.UNDEFINED_PAIR_ID] == 1


@pytest.mark.asyncio
async def test_decode_error_raw_preview_is_truncated() -> None:
    handler = StreamErrorHandler()
    raw = "x" * (RAW_PREVIEW_LIMIT * 2)

    event = await handler.emit_decode_error(TradeFieldFormatError("price", "abc"), raw=raw)

    assert event.context is not None
    assert len(event.context["raw_preview"]) == RAW_PREVIEW_LIMIT
    assert event.context["raw_length"] == len(raw)


@pytest.mark.asyncio
async def test_error_log_record_carries_scope_and_code(
    caplog: pytest.LogCaptureFixture,
) -> None:
    handler = StreamErrorHandler()

    with caplog.at_level(logging.ERROR):
        await handler.emit_receive_error(ConnectionResetError("reset by peer"))

    records = [r for r in caplog.records if getattr(r, "phase", None) == "receive"]
    assert records
    record = records[-1]
    assert record.getMessage().startswith("failed receiving a message")
    assert record.exchange == "poloniex"
    assert record.error_code == str(ErrorCode.RECEIVE_FAILED)
    assert record.error_type == "ConnectionResetError"


@pytest.mark.asyncio
async def test_failing_listener_does_not_break_reporting() -> None:
    received: list[ErrorEvent] = []

    async def _broken(event: ErrorEvent) -> None:
        raise RuntimeError("listener down")

    async def _collect(event: ErrorEvent) -> None:
        received.append(event)

    handler = StreamErrorHandler(listeners=[_broken, _collect])

    await handler.emit_sink_error(OSError("broken pipe"), trade_id="42706057")

    assert len(received) == 1
    assert received[0].code is ErrorCode.EMIT_FAILED
    assert received[0].context == {"trade_id": "42706057"}


@pytest.mark.asyncio
async def test_subscription_error_is_fatal() -> None:
    handler = StreamErrorHandler()

    event = await handler.emit_subscription_error(OSError("refused"), channel="USDT_BTC")

    assert event.code is ErrorCode.SUBSCRIBE_FAILED
    assert event.continue_stream is False
