from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from trade_stream.common.exceptions.exception_rule import classify_exception
from trade_stream.common.logger import PipelineLogger
from trade_stream.core.connection.utils.logging.log_phases import (
    PHASE_DECODE,
    PHASE_EMIT,
    PHASE_RECEIVE,
    PHASE_SHUTDOWN,
    PHASE_SUBSCRIBE,
)
from trade_stream.core.connection.utils.logging.logging_mixin import (
    ScopedConnectionLoggingMixin,
)
from trade_stream.core.dto.internal.common import StreamScopeDomain
from trade_stream.core.types import ErrorCode, ErrorDomain

logger = PipelineLogger.get_logger("error_handler", "connection")

# 로그에 남길 원본 메시지 최대 길이
RAW_PREVIEW_LIMIT = 256


@dataclass(frozen=True, slots=True)
class ErrorEvent:
    """에러 이벤트 (순수 데이터)"""

    exc: BaseException
    kind: str  # "receive", "decode", "sink", "shutdown", "subscribe"
    domain: ErrorDomain
    code: ErrorCode
    continue_stream: bool
    context: dict[str, Any] | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


ErrorListener = Callable[[ErrorEvent], Awaitable[None]]


class StreamErrorHandler(ScopedConnectionLoggingMixin):
    """스트림 에러 처리 전담 클래스 (StreamLoop의 에러 채널)

    책임:
    - 예외 분류 (규칙 테이블)
    - 구조화 로그 기록 (누락 없이 반드시 1회)
    - 코드별 카운트 및 리스너 통지
    """

    _logger = logger

    def __init__(
        self,
        scope: StreamScopeDomain | None = None,
        listeners: list[ErrorListener] | None = None,
    ) -> None:
        self.scope = scope or StreamScopeDomain()
        self._listeners: list[ErrorListener] = list(listeners or [])
        self.error_counts: Counter[ErrorCode] = Counter()

    async def _emit(
        self,
        err: BaseException,
        *,
        kind: str,
        phase: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> ErrorEvent:
        domain, code, continue_stream = classify_exception(err, kind)
        event = ErrorEvent(
            exc=err,
            kind=kind,
            domain=domain,
            code=code,
            continue_stream=continue_stream,
            context=context,
        )
        self.error_counts[code] += 1

        log_extra = {
            "error_domain": str(domain),
            "error_code": str(code),
            "error_type": type(err).__name__,
            "error_message": str(err),
            **(context or {}),
        }
        if continue_stream:
            self._log_error(f"{message}: {err}", phase, **log_extra)
        else:
            self._log_error(f"{message}: {err}", phase, exc_info=err, **log_extra)

        for listener in self._listeners:
            try:
                await listener(event)
            except Exception as listener_error:
                self._log_warning(
                    f"error listener failed: {listener_error}",
                    phase,
                    listener=getattr(listener, "__name__", repr(listener)),
                )
        return event

    async def emit_receive_error(self, err: BaseException) -> ErrorEvent:
        """수신 실패 (일시적, 스트림 계속)"""
        return await self._emit(
            err, kind="receive", phase=PHASE_RECEIVE, message="failed receiving a message"
        )

    async def emit_decode_error(self, err: BaseException, raw: str | None = None) -> ErrorEvent:
        """메시지 디코딩 실패 (해당 메시지만 폐기)"""
        context = None
        if raw is not None:
            context = {"raw_preview": raw[:RAW_PREVIEW_LIMIT], "raw_length": len(raw)}
        return await self._emit(
            err,
            kind="decode",
            phase=PHASE_DECODE,
            message="failed fetching trade fields",
            context=context,
        )

    async def emit_sink_error(self, err: BaseException, trade_id: str | None = None) -> ErrorEvent:
        """출력 싱크 전달 실패 (레코드 단위, 스트림 계속)"""
        return await self._emit(
            err,
            kind="sink",
            phase=PHASE_EMIT,
            message="failed emitting trade record",
            context={"trade_id": trade_id} if trade_id else None,
        )

    async def emit_shutdown_error(self, err: BaseException) -> ErrorEvent:
        """종료 실패 (베스트 에포트, 상위로 전파하지 않음)"""
        return await self._emit(
            err, kind="shutdown", phase=PHASE_SHUTDOWN, message="failed shutting down client"
        )

    async def emit_subscription_error(
        self, err: BaseException, channel: str | None = None
    ) -> ErrorEvent:
        """시작 시 구독 실패 (치명적, 호출자가 프로세스를 중단)"""
        return await self._emit(
            err,
            kind="subscribe",
            phase=PHASE_SUBSCRIBE,
            message="failed subscribing",
            context={"subscribe_channel": channel} if channel else None,
        )
