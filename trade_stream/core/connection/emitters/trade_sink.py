"""체결 레코드 출력 싱크."""

from __future__ import annotations

import sys
from typing import Protocol, TextIO

from trade_stream.common.serde import to_pretty_str
from trade_stream.core.dto.internal.trade import TradeRecord
from trade_stream.core.dto.io.trade import RecentTradeDTO


class TradeSink(Protocol):
    """StreamLoop가 레코드를 전달하는 출력 협력자"""

    async def emit(self, record: TradeRecord) -> None: ...


class StdoutTradeSink:
    """레코드를 들여쓰기 JSON으로 출력 (기본: 표준출력).

    출력 형식: {id, pair, price, amount, side, timestamp}
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    async def emit(self, record: TradeRecord) -> None:
        dto = RecentTradeDTO.from_domain(record)
        stream = self._stream or sys.stdout
        stream.write(to_pretty_str(dto.model_dump(mode="json")) + "\n")
        stream.flush()
