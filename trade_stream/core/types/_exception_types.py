"""에러 분류 타입 정의 모듈.

광범위한 Exception 사용을 지양하고, 의도한 예외만 명시적으로 분류하기 위해 사용합니다.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TypeAlias


class ErrorDomain(StrEnum):
    """에러 도메인 분류"""

    CONNECTION = "connection"
    REGISTRY = "registry"
    PAYLOAD = "payload"
    OUTPUT = "output"
    UNKNOWN = "unknown"


class ErrorCode(StrEnum):
    """에러 코드 분류"""

    RECEIVE_FAILED = "receive_failed"
    SUBSCRIBE_FAILED = "subscribe_failed"
    SHUTDOWN_FAILED = "shutdown_failed"
    UNDEFINED_PAIR_ID = "undefined_pair_id"
    INVALID_TRADE_TYPE = "invalid_trade_type"
    INVALID_FIELD_FORMAT = "invalid_field_format"
    EMIT_FAILED = "emit_failed"
    UNKNOWN_ERROR = "unknown_error"


# (도메인, 코드, 스트림 계속 여부)
ErrorCategory: TypeAlias = tuple[ErrorDomain, ErrorCode, bool]
ExceptionGroup: TypeAlias = type[BaseException] | tuple[type[BaseException], ...]
RuleKind: TypeAlias = tuple[str, ...]
