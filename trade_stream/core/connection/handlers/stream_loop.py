"""체결 스트림 수신 루프 (수신 → 디코딩 → 출력).

상태:
- RUNNING: 취소 토큰 확인(논블로킹) → 수신(블로킹) → 디코딩 → 싱크 전달
- TERMINATING: 전송 계층 종료(정확히 1회) → 완료 신호

취소는 반복 사이에서만 관찰하며, 진행 중인 수신은 끝날 때까지 기다립니다.
"""

from __future__ import annotations

import asyncio
from enum import StrEnum

from trade_stream.common.logger import PipelineLogger
from trade_stream.core.connection.emitters.trade_sink import TradeSink
from trade_stream.core.connection.error_handler import StreamErrorHandler
from trade_stream.core.connection.transport import WsClient
from trade_stream.core.connection.utils.logging.log_phases import (
    PHASE_DECODE,
    PHASE_LOOP_START,
    PHASE_LOOP_STOP,
    PHASE_SHUTDOWN,
)
from trade_stream.core.connection.utils.logging.logging_mixin import (
    ScopedConnectionLoggingMixin,
)
from trade_stream.core.connection.utils.trades.poloniex import (
    PoloniexTradeParser,
    get_poloniex_trade_parser,
)
from trade_stream.core.dto.internal.common import StreamScopeDomain

logger = PipelineLogger.get_logger("stream_loop", "connection")


class StreamState(StrEnum):
    RUNNING = "running"
    TERMINATING = "terminating"


class StreamLoop(ScopedConnectionLoggingMixin):
    """취소 가능한 체결 수신 루프.

    - 수신 실패: 에러 채널 보고 후 계속 (일시적 I/O 오류)
    - 디코딩 실패: 에러 채널 보고 후 다음 메시지로 (메시지 단위 폐기)
    - 레코드는 메시지 내/메시지 간 순서를 그대로 싱크에 전달
    - 전송 계층은 이 루프만 소유하고, 종료 시 정확히 1회 닫음
    """

    _logger = logger

    def __init__(
        self,
        transport: WsClient,
        sink: TradeSink,
        parser: PoloniexTradeParser | None = None,
        error_handler: StreamErrorHandler | None = None,
        scope: StreamScopeDomain | None = None,
        error_pause: float = 0.0,
    ) -> None:
        """
        Args:
            transport: 송수신 협력자 (send/receive/shutdown)
            sink: 출력 협력자
            parser: 메시지 디코더 (기본: 기본 레지스트리 파서)
            error_handler: 에러 채널 (기본: 로깅 전용)
            scope: 로그 스코프
            error_pause: 수신 실패 후 다음 수신까지 대기 시간(초), 0이면 양보만
        """
        self.scope = scope or StreamScopeDomain()
        self._transport = transport
        self._sink = sink
        self._parser = parser or get_poloniex_trade_parser()
        self._error_handler = error_handler or StreamErrorHandler(self.scope)
        self._error_pause = error_pause

        self._state = StreamState.RUNNING
        self._closed: bool = False
        self._completed = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

        self.received_count: int = 0
        self.emitted_count: int = 0

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def closed(self) -> bool:
        """전송 계층 종료 여부"""
        return self._closed

    @property
    def completed(self) -> asyncio.Event:
        """종료 핸드셰이크 완료 신호"""
        return self._completed

    def start(self, cancel: asyncio.Event) -> asyncio.Event:
        """루프를 태스크로 시작하고 완료 신호를 반환합니다.

        Args:
            cancel: 외부 취소 토큰 (set 되면 다음 반복에서 종료)

        Returns:
            종료 핸드셰이크가 끝나면 set 되는 Event
        """
        if self._task is not None:
            raise RuntimeError("stream loop already started")
        self._task = asyncio.create_task(self.run(cancel), name="poloniex-stream-loop")
        return self._completed

    async def run(self, cancel: asyncio.Event) -> None:
        """취소 토큰이 set 될 때까지 수신/디코딩/출력을 반복합니다."""
        self._log_info("stream loop started", PHASE_LOOP_START)
        try:
            while self._state is StreamState.RUNNING and not cancel.is_set():
                await self._step()
        except asyncio.CancelledError:
            self._log_info("stream loop task cancelled", PHASE_LOOP_STOP)
            raise
        finally:
            self._log_info(
                "stream loop stopping",
                PHASE_LOOP_STOP,
                received=self.received_count,
                emitted=self.emitted_count,
            )
            await self.shutdown()

    async def _step(self) -> None:
        try:
            message = await self._transport.receive()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            await self._error_handler.emit_receive_error(e)
            # 즉시 실패하는 수신에서도 이벤트 루프(시그널 핸들러)에 양보
            await asyncio.sleep(self._error_pause)
            return

        self.received_count += 1

        try:
            records = self._parser.parse(message)
        except Exception as e:
            await self._error_handler.emit_decode_error(e, raw=message)
            return

        if records:
            self._log_debug("decoded trade records", PHASE_DECODE, count=len(records))

        for record in records:
            try:
                await self._sink.emit(record)
            except Exception as e:
                await self._error_handler.emit_sink_error(e, trade_id=record.id)
                continue
            self.emitted_count += 1

    async def shutdown(self) -> None:
        """TERMINATING 전이: 전송 계층을 정확히 1회 닫고 완료 신호를 보냅니다.

        종료 실패는 보고만 하고 전파하지 않습니다 (베스트 에포트).
        """
        if self._closed:
            return
        self._closed = True
        self._state = StreamState.TERMINATING

        try:
            await self._transport.shutdown()
        except Exception as e:
            await self._error_handler.emit_shutdown_error(e)
        else:
            self._log_info("success client shutdown", PHASE_SHUTDOWN)
        finally:
            self._completed.set()
