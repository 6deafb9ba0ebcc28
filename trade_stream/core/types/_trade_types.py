"""거래 도메인 열거형 정의 모듈.

Pair, TradeSide는 닫힌 집합이며 INVALID 센티넬을 명시적으로 가집니다.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final, TypeAlias


class Pair(StrEnum):
    """내부 거래쌍 표기 (거래소 채널 ID와 별개)

    - 값(value)이 문자열 표현입니다 ("BTC_USDT").
    - INVALID는 조회 실패를 나타내는 센티넬로, TradeRecord에 실리지 않습니다.
    """

    INVALID = ""
    BTC_USDT = "BTC_USDT"
    TRX_USDT = "TRX_USDT"
    ETH_USDT = "ETH_USDT"


class TradeSide(StrEnum):
    """체결 방향 (거래소가 집계한 기준)"""

    INVALID = "INVALID"
    BUY = "BUY"
    SELL = "SELL"


# 구독 대상 거래쌍 (선언 순서 = 구독 순서)
PAIRS_LIST: Final[tuple[Pair, ...]] = (Pair.BTC_USDT, Pair.TRX_USDT, Pair.ETH_USDT)

# 거래소 고유 식별자
ChannelID: TypeAlias = str
SubscriptionToken: TypeAlias = str
