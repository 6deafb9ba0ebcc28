from __future__ import annotations

from dataclasses import dataclass

from trade_stream.core.types import ErrorCategory, ExceptionGroup, RuleKind


@dataclass(slots=True, frozen=True, eq=True, repr=False, match_args=False, kw_only=True)
class StreamScopeDomain:
    """스트림 스코프(내부 도메인 값 객체).

    - 로그 extra, 에러 컨텍스트에서 공통으로 사용
    """

    exchange: str = "poloniex"
    channel: str = "trades"


@dataclass(
    slots=True, frozen=True, eq=False, repr=False, match_args=False, kw_only=True
)
class RuleDomain:
    """예외 분류 규칙(도메인)

    kinds: 규칙이 적용될 경계 종류 ("decode", "receive", "subscribe", "shutdown", "sink")
    exc:   매칭할 예외 타입(단일 타입 또는 타입 튜플)
    result: ErrorCategory
    """

    kinds: RuleKind
    exc: ExceptionGroup
    result: ErrorCategory
