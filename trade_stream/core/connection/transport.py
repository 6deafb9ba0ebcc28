"""Poloniex 웹소켓 전송 계층.

StreamLoop가 소유하는 송수신 협력자입니다. 기본은 프레임 단위 수신이며,
buffer_size를 주면 고정 크기로 잘라 반환하므로 디코더는 앞/뒤가 잘린 메시지를 견뎌야 합니다.
"""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

import websockets

from trade_stream.common.logger import PipelineLogger
from trade_stream.config.settings import PoloniexSettings, poloniex_settings

logger = PipelineLogger.get_logger("transport", "connection")


class WsClient(Protocol):
    """StreamLoop가 요구하는 전송 인터페이스"""

    async def send(self, message: bytes | str) -> None: ...

    async def receive(self) -> str: ...

    async def shutdown(self) -> None: ...


class PoloniexWebsocketClient:
    """Poloniex 푸시 API 웹소켓 클라이언트.

    - connect(): wss://{host}/ws 에 Origin https://{host} 로 접속
    - receive(): 최대 buffer_size 문자씩 반환 (0이면 프레임 단위)
    - shutdown(): 소켓 종료, 두 번째 호출부터는 no-op
    """

    def __init__(
        self,
        url: str,
        origin: str | None = None,
        buffer_size: int = 0,
        receive_timeout: float = 0.0,
        open_timeout: float = 10.0,
        close_timeout: float = 5.0,
    ) -> None:
        if buffer_size < 0:
            raise ValueError("buffer_size must be >= 0")
        self.url = url
        self.origin = origin
        self.buffer_size = buffer_size
        self.receive_timeout = receive_timeout
        self.open_timeout = open_timeout
        self.close_timeout = close_timeout

        self._websocket: Any = None
        self._pending: str = ""
        self._closed: bool = False

    @classmethod
    def from_settings(cls, settings: PoloniexSettings | None = None) -> PoloniexWebsocketClient:
        settings = settings or poloniex_settings
        return cls(
            url=settings.url,
            origin=settings.origin,
            buffer_size=settings.receive_buffer_size,
            receive_timeout=settings.receive_timeout,
            open_timeout=settings.open_timeout,
            close_timeout=settings.close_timeout,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    async def connect(self) -> None:
        """웹소켓 연결 (하트비트는 거래소 측 heartbeat 메시지에 맡김)"""
        if self._websocket is not None:
            raise RuntimeError("already connected")
        logger.info(f"poloniex: 연결 시도 중... {self.url}")
        self._websocket = await websockets.connect(
            uri=self.url,
            origin=self.origin,
            open_timeout=self.open_timeout,
            close_timeout=self.close_timeout,
            ping_interval=None,
        )
        logger.info("poloniex: 연결 성공")

    def attach(self, websocket: Any) -> None:
        """이미 열린 연결을 주입 (테스트/외부 연결 재사용)"""
        self._websocket = websocket

    def _require_websocket(self) -> Any:
        if self._closed:
            raise ConnectionError("client already shut down")
        if self._websocket is None:
            raise ConnectionError("client is not connected")
        return self._websocket

    async def send(self, message: bytes | str) -> None:
        websocket = self._require_websocket()
        await websocket.send(message)

    async def _recv_frame(self, websocket: Any) -> str:
        if self.receive_timeout > 0:
            frame = await asyncio.wait_for(websocket.recv(), timeout=self.receive_timeout)
        else:
            frame = await websocket.recv()
        if isinstance(frame, bytes):
            return frame.decode("utf-8")
        return frame

    async def receive(self) -> str:
        """다음 수신 청크 반환.

        남은 프레임 조각이 있으면 소켓을 읽지 않고 그것부터 반환합니다.
        """
        websocket = self._require_websocket()
        if not self._pending:
            self._pending = await self._recv_frame(websocket)

        if self.buffer_size == 0 or len(self._pending) <= self.buffer_size:
            chunk, self._pending = self._pending, ""
        else:
            chunk = self._pending[: self.buffer_size]
            self._pending = self._pending[self.buffer_size :]
        return chunk

    async def shutdown(self) -> None:
        """소켓 종료 (멱등)"""
        if self._closed:
            return
        self._closed = True
        self._pending = ""
        websocket, self._websocket = self._websocket, None
        if websocket is not None:
            await websocket.close()
