"""스트림 로그 phase 상수."""

from __future__ import annotations

from typing import Final

PHASE_SUBSCRIBE: Final[str] = "subscribe"
PHASE_RECEIVE: Final[str] = "receive"
PHASE_DECODE: Final[str] = "decode"
PHASE_EMIT: Final[str] = "emit"
PHASE_LOOP_START: Final[str] = "loop_start"
PHASE_LOOP_STOP: Final[str] = "loop_stop"
PHASE_SHUTDOWN: Final[str] = "shutdown"
