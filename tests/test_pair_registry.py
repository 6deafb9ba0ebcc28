from __future__ import annotations

import pytest

from trade_stream.common.exceptions import (
    InvalidTradeTypeError,
    UndefinedPairError,
    UndefinedPairIDError,
)
from trade_stream.core.connection.utils.pairs import PairRegistry, default_pair_registry
from trade_stream.core.connection.utils.trades.side import decode_side
from trade_stream.core.types import PAIRS_LIST, Pair, TradeSide
from tests.factory_builders import build_registry


@pytest.mark.parametrize(
    ("pair", "token", "channel_id"),
    [
        (Pair.BTC_USDT, "USDT_BTC", "121"),
        (Pair.TRX_USDT, "USDT_TRX", "265"),
        (Pair.ETH_USDT, "USDT_ETH", "149"),
    ],
)
def test_default_registry_is_bijection(pair: Pair, token: str, channel_id: str) -> None:
    registry = default_pair_registry()

    assert registry.subscription_token(pair) == token
    assert registry.pair_from_channel_id(channel_id) is pair
    assert registry.channel_id(pair) == channel_id


def test_default_registry_covers_pairs_list_in_order() -> None:
    assert default_pair_registry().pairs == PAIRS_LIST


@pytest.mark.parametrize("channel_id", ["144", "", " 121", "USDT_BTC"])
def test_unknown_channel_id_raises(channel_id: str) -> None:
    with pytest.raises(UndefinedPairIDError):
        default_pair_registry().pair_from_channel_id(channel_id)


def test_sentinel_has_no_subscription_token() -> None:
    with pytest.raises(UndefinedPairError):
        default_pair_registry().subscription_token(Pair.INVALID)


def test_registry_tables_are_read_only() -> None:
    registry = default_pair_registry()

    with pytest.raises(TypeError):
        registry.channel_ids["999"] = Pair.BTC_USDT  # type: ignore[index]


@pytest.mark.parametrize(
    "overrides",
    [
        {"channel_ids": {"7": Pair.BTC_USDT}},
        {"channel_ids": {"7": Pair.BTC_USDT, "8": Pair.BTC_USDT}},
        {"tokens": {Pair.BTC_USDT: "SAME", Pair.ETH_USDT: "SAME"}},
        {
            "tokens": {Pair.INVALID: "NONE", Pair.BTC_USDT: "USDT_BTC"},
            "channel_ids": {"0": Pair.INVALID, "7": Pair.BTC_USDT},
        },
    ],
)
def test_registry_rejects_non_bijective_tables(overrides: dict) -> None:
    with pytest.raises(ValueError):
        build_registry(**overrides)


def test_custom_registry_is_independent_of_default() -> None:
    registry = build_registry()

    assert registry.pair_from_channel_id("7") is Pair.BTC_USDT
    assert registry.pairs == (Pair.BTC_USDT, Pair.ETH_USDT)
    with pytest.raises(UndefinedPairError):
        registry.subscription_token(Pair.TRX_USDT)
    assert isinstance(registry, PairRegistry)


@pytest.mark.parametrize(("marker", "side"), [("1", TradeSide.BUY), ("0", TradeSide.SELL)])
def test_decode_side(marker: str, side: TradeSide) -> None:
    assert decode_side(marker) is side


@pytest.mark.parametrize("marker", ["9", "", " 1", "buy", "01", "INVALID"])
def test_decode_side_rejects_other_markers(marker: str) -> None:
    with pytest.raises(InvalidTradeTypeError):
        decode_side(marker)
