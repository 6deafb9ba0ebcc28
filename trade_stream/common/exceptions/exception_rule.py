from __future__ import annotations

import asyncio
from typing import TypeAlias

from pydantic import ValidationError
from websockets.exceptions import ConnectionClosed, InvalidStatus, WebSocketException

from trade_stream.common.exceptions.errors import (
    InvalidTradeTypeError,
    SubscriptionError,
    TradeFieldFormatError,
    UndefinedPairError,
    UndefinedPairIDError,
)
from trade_stream.core.dto.internal.common import RuleDomain
from trade_stream.core.types import ErrorCategory, ErrorCode, ErrorDomain

# 소켓/웹소켓 등
SOCKET_EXCEPTIONS = (
    asyncio.TimeoutError,
    InvalidStatus,
    WebSocketException,
    ConnectionClosed,
    OSError,
)

# 레지스트리(채널 ID, 체결 방향) 관련
REGISTRY_ERRORS = (
    UndefinedPairIDError,
    UndefinedPairError,
    InvalidTradeTypeError,
)

# 출력 레코드 변환/직렬화
SERIALIZATION_ERRORS = (
    ValueError,
    TypeError,
    ValidationError,
)


# 1) 레지스트리 규칙 (decode)
RULES_REGISTRY: list[RuleDomain] = [
    RuleDomain(
        kinds=("decode",),
        exc=UndefinedPairIDError,
        result=(ErrorDomain.REGISTRY, ErrorCode.UNDEFINED_PAIR_ID, True),
    ),
    RuleDomain(
        kinds=("decode", "subscribe"),
        exc=UndefinedPairError,
        result=(ErrorDomain.REGISTRY, ErrorCode.UNDEFINED_PAIR_ID, False),
    ),
    RuleDomain(
        kinds=("decode",),
        exc=InvalidTradeTypeError,
        result=(ErrorDomain.REGISTRY, ErrorCode.INVALID_TRADE_TYPE, True),
    ),
]

# 2) 필드 형식 규칙 (decode, 구체 -> 포괄)
RULES_PAYLOAD: list[RuleDomain] = [
    RuleDomain(
        kinds=("decode",),
        exc=TradeFieldFormatError,
        result=(ErrorDomain.PAYLOAD, ErrorCode.INVALID_FIELD_FORMAT, True),
    ),
    RuleDomain(
        kinds=("decode",),
        exc=(ValueError, TypeError, IndexError),
        result=(ErrorDomain.PAYLOAD, ErrorCode.INVALID_FIELD_FORMAT, True),
    ),
]

# 3) 소켓 규칙 (receive/subscribe/shutdown)
RULES_SOCKET: list[RuleDomain] = [
    RuleDomain(
        kinds=("receive",),
        exc=SOCKET_EXCEPTIONS,
        result=(ErrorDomain.CONNECTION, ErrorCode.RECEIVE_FAILED, True),
    ),
    RuleDomain(
        kinds=("receive",),
        exc=UnicodeDecodeError,
        result=(ErrorDomain.PAYLOAD, ErrorCode.INVALID_FIELD_FORMAT, True),
    ),
    RuleDomain(
        kinds=("subscribe",),
        exc=(SubscriptionError, *SOCKET_EXCEPTIONS),
        result=(ErrorDomain.CONNECTION, ErrorCode.SUBSCRIBE_FAILED, False),
    ),
    RuleDomain(
        kinds=("shutdown",),
        exc=SOCKET_EXCEPTIONS,
        result=(ErrorDomain.CONNECTION, ErrorCode.SHUTDOWN_FAILED, False),
    ),
]

# 4) 출력 싱크 규칙
RULES_SINK: list[RuleDomain] = [
    RuleDomain(
        kinds=("sink",),
        exc=(*SERIALIZATION_ERRORS, OSError),
        result=(ErrorDomain.OUTPUT, ErrorCode.EMIT_FAILED, True),
    ),
]

# 5) 전체 규칙 (구체 -> 포괄 순서를 유지하며 결합)
# 주의: 매칭 우선순위를 보장하기 위해 선언 순서를 유지합니다.
RULES_FOR_STREAM: list[RuleDomain] = [
    *RULES_REGISTRY,
    *RULES_PAYLOAD,
    *RULES_SOCKET,
    *RULES_SINK,
]

RuleDict: TypeAlias = dict[str, list[RuleDomain]]
RULES_BY_KIND: RuleDict = {
    kind: [rule for rule in RULES_FOR_STREAM if kind in rule.kinds]
    for kind in ("decode", "receive", "subscribe", "shutdown", "sink")
}

# kind별 미분류 예외의 기본 코드
_FALLBACK_BY_KIND: dict[str, ErrorCategory] = {
    "receive": (ErrorDomain.CONNECTION, ErrorCode.RECEIVE_FAILED, True),
    "subscribe": (ErrorDomain.CONNECTION, ErrorCode.SUBSCRIBE_FAILED, False),
    "shutdown": (ErrorDomain.CONNECTION, ErrorCode.SHUTDOWN_FAILED, False),
    "sink": (ErrorDomain.OUTPUT, ErrorCode.EMIT_FAILED, True),
}


def classify_exception(err: BaseException, kind: str) -> ErrorCategory:
    """예외 → (ErrorDomain, ErrorCode, continue_stream) 분류기 (규칙 테이블 기반)

    - if-else 분기를 제거하고, 선언적 규칙을 순서대로 평가합니다.
    - 규칙은 "구체 → 포괄" 순서로 선언되어 가장 특수한 규칙이 먼저 매칭됩니다.
    - 규칙에 없으면 kind별 기본값, 그것도 없으면 UNKNOWN을 반환합니다.
    """
    for rule in RULES_BY_KIND.get(kind, []):
        if isinstance(err, rule.exc):
            return rule.result

    return _FALLBACK_BY_KIND.get(
        kind, (ErrorDomain.UNKNOWN, ErrorCode.UNKNOWN_ERROR, False)
    )
