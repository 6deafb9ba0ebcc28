"""애플리케이션 진입점

Poloniex 푸시 피드 체결 스트림
- 거래쌍별 구독 요청 전송 (실패 시 즉시 종료)
- 수신 → 디코딩 → 표준출력 (StreamLoop)
- SIGINT/SIGTERM → 취소 토큰 → 전송 계층 종료 → 완료 신호 후 프로세스 종료

Usage:
    python main.py
    POLONIEX_RECEIVE_BUFFER_SIZE=512 LOG_LEVEL=DEBUG python main.py
"""

from __future__ import annotations

import asyncio
import signal
import sys

from trade_stream.common.exceptions import SubscriptionError
from trade_stream.common.logger import PipelineLogger
from trade_stream.config.settings import PoloniexSettings, poloniex_settings
from trade_stream.core.connection.emitters.trade_sink import StdoutTradeSink, TradeSink
from trade_stream.core.connection.error_handler import StreamErrorHandler
from trade_stream.core.connection.handlers.stream_loop import StreamLoop
from trade_stream.core.connection.transport import PoloniexWebsocketClient, WsClient
from trade_stream.core.connection.utils.pairs import PairRegistry, default_pair_registry
from trade_stream.core.connection.utils.subscription import new_subscribe_cmd
from trade_stream.core.connection.utils.trades.poloniex import PoloniexTradeParser

logger = PipelineLogger.get_logger("main", "app")

TERMINATION_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class Application:
    """애플리케이션 메인 클래스

    책임:
    - 전송 계층 연결 및 구독
    - 종료 시그널 → 취소 토큰 연결
    - StreamLoop 실행 및 완료 신호 대기
    """

    def __init__(
        self,
        settings: PoloniexSettings | None = None,
        registry: PairRegistry | None = None,
        transport: WsClient | None = None,
        sink: TradeSink | None = None,
    ) -> None:
        self.settings = settings or poloniex_settings
        self.registry = registry or default_pair_registry()
        self.transport: WsClient = transport or PoloniexWebsocketClient.from_settings(
            self.settings
        )
        self.sink: TradeSink = sink or StdoutTradeSink()
        self.error_handler = StreamErrorHandler()
        self.cancel = asyncio.Event()
        self.stream_loop: StreamLoop | None = None

    async def subscribe(self) -> None:
        """설정된 거래쌍마다 구독 요청 1회 전송

        Raises:
            SubscriptionError: 인코딩/전송 실패 (치명적)
        """
        for pair in self.settings.pairs:
            try:
                channel = self.registry.subscription_token(pair)
                await self.transport.send(new_subscribe_cmd(channel))
            except Exception as e:
                await self.error_handler.emit_subscription_error(e, channel=str(pair))
                raise SubscriptionError(f"failed subscribing to {pair}: {e}") from e
            logger.info(f"구독 요청 전송 완료: {pair} ({channel})")

    async def initialize(self) -> None:
        """연결 및 구독 (StreamLoop 시작 전)"""
        logger.info("run application")
        if isinstance(self.transport, PoloniexWebsocketClient):
            try:
                await self.transport.connect()
            except Exception as e:
                await self.error_handler.emit_subscription_error(e, channel=self.settings.url)
                raise SubscriptionError(f"failed connecting to {self.settings.url}: {e}") from e
        await self.subscribe()

    def install_signal_handlers(self) -> None:
        """SIGINT/SIGTERM → 취소 토큰 set (유일한 동시 writer)"""
        loop = asyncio.get_running_loop()
        for sig in TERMINATION_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.request_stop, sig)
            except (NotImplementedError, RuntimeError):
                # add_signal_handler 미지원 플랫폼은 KeyboardInterrupt 경로에 맡김
                logger.warning(f"시그널 핸들러 등록 불가: {sig!r}")

    def request_stop(self, sig: signal.Signals | None = None) -> None:
        if not self.cancel.is_set():
            logger.info(f"종료 요청 수신: {sig.name if sig else 'manual'}")
        self.cancel.set()

    async def run(self) -> None:
        """StreamLoop 실행 후 완료 신호까지 대기"""
        self.stream_loop = StreamLoop(
            transport=self.transport,
            sink=self.sink,
            parser=PoloniexTradeParser(self.registry),
            error_handler=self.error_handler,
            error_pause=self.settings.receive_error_pause,
        )
        completed = self.stream_loop.start(self.cancel)
        await completed.wait()
        logger.info("terminate application")

    async def shutdown(self) -> None:
        """루프 시작 전 실패 경로에서도 전송 계층을 정리"""
        if self.stream_loop is not None:
            await self.stream_loop.shutdown()
            return
        try:
            await self.transport.shutdown()
        except Exception as e:
            await self.error_handler.emit_shutdown_error(e)


async def main() -> int:
    """메인 실행 함수 (프로세스 종료 코드 반환)"""
    app = Application()
    app.install_signal_handlers()
    try:
        await app.initialize()
        await app.run()
    except SubscriptionError:
        logger.critical("구독 실패로 프로그램을 종료합니다")
        return 1
    finally:
        await app.shutdown()
    return 0


def cli() -> None:
    """콘솔 스크립트 진입점"""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\n프로그램이 종료되었습니다.", file=sys.stderr)


if __name__ == "__main__":
    cli()
