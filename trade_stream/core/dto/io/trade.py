"""출력 체결 레코드 DTO.

싱크(표준출력 등)로 전달되는 레코드 형식입니다.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import Field, StrictStr, StringConstraints

from trade_stream.core.dto.internal.trade import TradeRecord
from trade_stream.core.dto.io._base import BaseIOModelDTO

# 거래쌍 문자열: "BTC_USDT" 형식
PairStr = Annotated[
    StrictStr,
    StringConstraints(
        min_length=3,
        max_length=21,
        pattern=r"^[A-Z0-9]{1,10}_[A-Z0-9]{1,10}$",
        strip_whitespace=True,
    ),
]


class RecentTradeDTO(BaseIOModelDTO):
    """최근 체결 출력 DTO.

    Example:
        >>> dto = RecentTradeDTO(
        ...     id="42706057",
        ...     pair="BTC_USDT",
        ...     price=0.05567134,
        ...     amount=0.00181421,
        ...     side="BUY",
        ...     timestamp=datetime(2019, 3, 18, 2, 45, 19, tzinfo=timezone.utc),
        ... )
    """

    id: StrictStr = Field(..., min_length=1, description="거래 ID (거래소 부여)")
    pair: PairStr = Field(..., description="거래쌍")
    price: float = Field(..., description="체결 가격")
    amount: float = Field(..., description="체결량")
    side: Literal["BUY", "SELL"] = Field(
        ..., description="거래소가 집계한 체결 방향 (buy/sell)"
    )
    timestamp: datetime = Field(..., description="체결 시각 (UTC)")

    @classmethod
    def from_domain(cls, record: TradeRecord) -> RecentTradeDTO:
        """도메인 레코드 → 출력 DTO"""
        return cls(
            id=record.id,
            pair=str(record.pair),
            price=record.price,
            amount=record.amount,
            side=str(record.side),
            timestamp=record.timestamp,
        )
