"""체결(Trade) 내부 도메인 모델.

디코더가 직접 생성하는 불변 도메인 객체 (dataclass 기반).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from trade_stream.core.types import Pair, TradeSide


@dataclass(slots=True, frozen=True, eq=True, repr=True, match_args=False, kw_only=True)
class TradeRecord:
    """체결 레코드 도메인.

    특징:
    - 불변 객체 (frozen=True)
    - 필드 외의 식별성 없음 (eq=True)
    - 센티넬 값(Pair.INVALID, TradeSide.INVALID)으로는 생성 불가

    Poloniex 매핑:
    - ["t", id, side, price, amount, timestamp, timestamp_ms]
    - 채널 ID → pair (PairRegistry)
    """

    id: str
    pair: Pair
    side: TradeSide
    price: float
    amount: float
    timestamp: datetime

    def __post_init__(self) -> None:
        if self.pair is Pair.INVALID:
            raise ValueError("TradeRecord cannot carry Pair.INVALID")
        if self.side is TradeSide.INVALID:
            raise ValueError("TradeRecord cannot carry TradeSide.INVALID")
