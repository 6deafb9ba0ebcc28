"""송신 명령 DTO."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, StrictStr

from trade_stream.core.dto.io._base import BaseIOModelDTO


class SubscribeCommandDTO(BaseIOModelDTO):
    """구독 요청 ({"command": "subscribe", "channel": "USDT_BTC"})"""

    command: Literal["subscribe"] = "subscribe"
    channel: StrictStr = Field(..., min_length=1, description="구독 채널 토큰")
