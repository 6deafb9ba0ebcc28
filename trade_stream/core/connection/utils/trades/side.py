"""Poloniex 체결 방향 마커 디코더."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from trade_stream.common.exceptions import InvalidTradeTypeError
from trade_stream.core.types import TradeSide

BUY_MARKER = "1"
SELL_MARKER = "0"

_SIDE_BY_MARKER: Mapping[str, TradeSide] = MappingProxyType(
    {
        BUY_MARKER: TradeSide.BUY,
        SELL_MARKER: TradeSide.SELL,
    }
)


def decode_side(marker: str) -> TradeSide:
    """와이어 마커 → TradeSide ("1" = BUY, "0" = SELL).

    Raises:
        InvalidTradeTypeError: 그 외 모든 입력 (기본값으로 대체하지 않음)
    """
    side = _SIDE_BY_MARKER.get(marker)
    if side is None:
        raise InvalidTradeTypeError(marker)
    return side
