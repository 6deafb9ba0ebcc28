from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from trade_stream.core.connection.utils.pairs import PairRegistry
from trade_stream.core.dto.internal.common import StreamScopeDomain
from trade_stream.core.dto.internal.trade import TradeRecord
from trade_stream.core.types import Pair, TradeSide

ORDER_ENTRIES = (
    '["o", 1, "0.00001823", "5534.6474", "1552877119341"], '
    '["o", 0, "0.00001824", "6575.464","1552877119341"]'
)


def build_trade_entry(
    trade_id: str = "42706057",
    side: str = "1",
    price: str = '"0.05567134"',
    amount: str = '"0.00181421"',
    timestamp: str = "1552877119",
) -> str:
    return f'["t", "{trade_id}", {side}, {price}, {amount}, {timestamp}, "{timestamp}341"]'


def build_push_message(channel_id: str = "121", *entries: str, seq: int = 8768) -> str:
    body = ", ".join((ORDER_ENTRIES, *entries))
    return f"[ {channel_id}, {seq}, [ {body} ] ]"


def build_trade_record(**overrides: Any) -> TradeRecord:
    payload: dict[str, Any] = {
        "id": "42706057",
        "pair": Pair.BTC_USDT,
        "side": TradeSide.BUY,
        "price": 0.05567134,
        "amount": 0.00181421,
        "timestamp": datetime.fromtimestamp(1552877119, tz=timezone.utc),
    }
    payload.update(overrides)
    return TradeRecord(**payload)


def build_registry(**overrides: Any) -> PairRegistry:
    payload: dict[str, Any] = {
        "tokens": {Pair.BTC_USDT: "USDT_BTC", Pair.ETH_USDT: "USDT_ETH"},
        "channel_ids": {"7": Pair.BTC_USDT, "8": Pair.ETH_USDT},
    }
    payload.update(overrides)
    return PairRegistry(**payload)


def build_scope_domain(**overrides: str) -> StreamScopeDomain:
    payload = {"exchange": "poloniex", "channel": "trades"}
    payload.update(overrides)
    return StreamScopeDomain(**payload)
