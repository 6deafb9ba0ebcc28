"""스트림 도메인 예외 정의.

디코딩 예외는 모두 TradeDecodeError(ValueError)를 상속하며,
한 메시지의 디코딩 전체를 중단시킵니다.
"""

from __future__ import annotations


class TradeDecodeError(ValueError):
    """메시지 디코딩 실패 (해당 메시지만 폐기)"""


class UndefinedPairIDError(TradeDecodeError):
    """레지스트리에 없는 채널 ID"""

    def __init__(self, channel_id: str) -> None:
        super().__init__(f"undefined pair id: {channel_id!r}")
        self.channel_id = channel_id


class UndefinedPairError(TradeDecodeError):
    """구독 토큰이 없는 거래쌍 (센티넬 포함)"""

    def __init__(self, pair: str) -> None:
        super().__init__(f"undefined pair: {pair!r}")
        self.pair = pair


class InvalidTradeTypeError(TradeDecodeError):
    """"0"/"1" 이외의 체결 방향 마커"""

    def __init__(self, marker: str) -> None:
        super().__init__(f"invalid trade type: {marker!r}")
        self.marker = marker


class TradeFieldFormatError(TradeDecodeError):
    """가격/수량/타임스탬프 등 필드 형식 오류"""

    def __init__(self, field: str, raw: str, reason: str = "") -> None:
        detail = f" ({reason})" if reason else ""
        super().__init__(f"invalid {field} field: {raw!r}{detail}")
        self.field = field
        self.raw = raw


class SubscriptionError(RuntimeError):
    """시작 시 구독 요청 실패 (치명적)"""
