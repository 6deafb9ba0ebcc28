from __future__ import annotations

from datetime import datetime, timezone

import pytest

from trade_stream.common.exceptions import (
    InvalidTradeTypeError,
    TradeDecodeError,
    TradeFieldFormatError,
    UndefinedPairIDError,
)
from trade_stream.core.connection.utils.trades.poloniex import (
    PoloniexTradeParser,
    get_poloniex_trade_parser,
)
from trade_stream.core.dto.internal.trade import TradeRecord
from trade_stream.core.types import Pair, TradeSide
from tests.factory_builders import (
    build_push_message,
    build_registry,
    build_trade_entry,
    build_trade_record,
)


def _ts(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        pytest.param("", [], id="empty message, no trade fields"),
        pytest.param(
            '[ 121, 8768, [ ["o", 1, "0.00001823", "5534.6474", "1552877119341"], '
            '["o", 0, "0.00001824", "6575.464","1552877119341"], '
            '["t", "42706057", 1, "0.05567134", "0.00181421", 1552877119, "1552877119341"] ] ]',
            [build_trade_record()],
            id="one trade is discovered",
        ),
        pytest.param(
            '[149, 8768, [["o", 1, "0.00001823", "5534.6474", "1562877119341"], '
            '["o", 0, "0.00001824", "6575.464","1562877119341"], '
            '["t", "7854698457", 1, "112.00087", "0.00000081", 1562877119, "1562877119341"],'
            '["t", "38748937", 0, "111.09044", "0.00000066", 1562877119, "1562877119341"]]]',
            [
                TradeRecord(
                    id="7854698457",
                    pair=Pair.ETH_USDT,
                    side=TradeSide.BUY,
                    price=112.00087,
                    amount=0.00000081,
                    timestamp=_ts(1562877119),
                ),
                TradeRecord(
                    id="38748937",
                    pair=Pair.ETH_USDT,
                    side=TradeSide.SELL,
                    price=111.09044,
                    amount=0.00000066,
                    timestamp=_ts(1562877119),
                ),
            ],
            id="a few trades are discovered",
        ),
        pytest.param(
            '[ 121, 8768, [ ["o", 1, "0.00001823", "5534.6474", "1552877119341"], '
            '["o", 0, "0.00001824", "6575.464","1552877119341"] ] ]',
            [],
            id="no trades in message",
        ),
        pytest.param(
            '[ 144, 8768, [ ["o", 1, "0.00001823", "5534.6474", "1552877119341"], '
            '["t", "42706057", 0, "0.0556',
            [],
            id="corrupted message with trade block starting",
        ),
        pytest.param(
            '6057", 0, "0.05567134", "0.00181421", 1552877119, "1552877119341"] ] ]',
            [],
            id="corrupted message with trade block ending",
        ),
        pytest.param(
            '[ 121, 8768, [ ["o", 1, "0.000018',
            [],
            id="truncated before any trade block",
        ),
    ],
)
def test_parse_returns_records_in_entry_order(message: str, expected: list[TradeRecord]) -> None:
    parser = get_poloniex_trade_parser()

    assert parser.parse(message) == expected


@pytest.mark.parametrize(
    ("message", "error_type"),
    [
        pytest.param(
            '[ 121, 8768, [ ["o", 1, "0.00001823", "5534.6474", "1552877119341"], '
            '["o", 0, "0.00001824", "6575.464","1552877119341"], '
            '["t", "42706057", 9, "0.05567134", "0.00181421", 1552877119, "1552877119341"] ] ]',
            InvalidTradeTypeError,
            id="invalid trade type",
        ),
        pytest.param(
            '[ 144, 8768, [ ["o", 1, "0.00001823", "5534.6474", "1552877119341"], '
            '["o", 0, "0.00001824", "6575.464","1552877119341"], '
            '["t", "42706057", 0, "0.05567134", "0.00181421", 1552877119, "1552877119341"] ] ]',
            UndefinedPairIDError,
            id="undefined pair id",
        ),
        pytest.param(
            ' ["t", "42706057", 0, "0.05567134", "0.00181421", 1552877119, "1552877119341"] ]',
            UndefinedPairIDError,
            id="corrupted message including trade",
        ),
    ],
)
def test_parse_raises_for_unusable_message(message: str, error_type: type[Exception]) -> None:
    parser = get_poloniex_trade_parser()

    with pytest.raises(error_type):
        parser.parse(message)


def test_unknown_channel_wins_over_invalid_fields() -> None:
    message = build_push_message(
        "144", build_trade_entry(side="9", price='"abc"', timestamp="soon")
    )

    with pytest.raises(UndefinedPairIDError) as exc_info:
        get_poloniex_trade_parser().parse(message)

    assert exc_info.value.channel_id == "144"


def test_one_bad_entry_discards_whole_message() -> None:
    message = build_push_message(
        "121",
        build_trade_entry(trade_id="1"),
        build_trade_entry(trade_id="2", side="9"),
        build_trade_entry(trade_id="3"),
    )

    with pytest.raises(InvalidTradeTypeError):
        get_poloniex_trade_parser().parse(message)


@pytest.mark.parametrize(
    ("entry", "field"),
    [
        (build_trade_entry(price='"0.05x"'), "price"),
        (build_trade_entry(amount='"abc"'), "amount"),
        (build_trade_entry(timestamp="1552877119.5"), "timestamp"),
        (build_trade_entry(price='"0.055_671"'), "price"),
        (build_trade_entry(amount='"1_000"'), "amount"),
        (build_trade_entry(timestamp="1_552_877_119"), "timestamp"),
    ],
)
def test_malformed_numbers_raise_field_format_error(entry: str, field: str) -> None:
    with pytest.raises(TradeFieldFormatError) as exc_info:
        get_poloniex_trade_parser().parse(build_push_message("121", entry))

    assert exc_info.value.field == field
    assert isinstance(exc_info.value, TradeDecodeError)


def test_trade_block_with_too_few_fields_is_rejected() -> None:
    with pytest.raises(TradeFieldFormatError):
        get_poloniex_trade_parser().parse('[121, 1, [["t", "42706057", 1]]]')


def test_channel_id_is_captured_once_and_trimmed() -> None:
    message = build_push_message("  265 ", build_trade_entry(), build_trade_entry(side="0"))

    records = get_poloniex_trade_parser().parse(message)

    assert [r.pair for r in records] == [Pair.TRX_USDT, Pair.TRX_USDT]
    assert [r.side for r in records] == [TradeSide.BUY, TradeSide.SELL]


def test_parse_is_pure_across_calls() -> None:
    parser = get_poloniex_trade_parser()
    good = build_push_message("121", build_trade_entry())
    bad = build_push_message("144", build_trade_entry())

    first = parser.parse(good)
    with pytest.raises(UndefinedPairIDError):
        parser.parse(bad)
    # 앞 메시지가 남긴 상태(채널 ID, 블록 시작)가 없어야 함
    assert parser.parse('6057", 0, "1", "1", 1552877119, "1"] ] ]') == []
    assert parser.parse(good) == first


def test_parser_uses_injected_registry() -> None:
    parser = PoloniexTradeParser(build_registry())

    records = parser.parse(build_push_message("8", build_trade_entry(trade_id="99")))

    assert records == [build_trade_record(id="99", pair=Pair.ETH_USDT)]
    with pytest.raises(UndefinedPairIDError):
        parser.parse(build_push_message("121", build_trade_entry()))


def test_timestamp_is_utc_seconds() -> None:
    (record,) = get_poloniex_trade_parser().parse(
        build_push_message("121", build_trade_entry())
    )

    assert record.timestamp == datetime(2019, 3, 18, 2, 45, 19, tzinfo=timezone.utc)
