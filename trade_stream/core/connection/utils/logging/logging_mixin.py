from __future__ import annotations

from typing import Any

from trade_stream.common.logger import PipelineLogger
from trade_stream.core.dto.internal.common import StreamScopeDomain


class ScopedConnectionLoggingMixin:
    """Stream scope-aware structured logging helpers."""

    _logger: PipelineLogger
    scope: StreamScopeDomain

    def _scope_log_extra(self, phase: str, **extra: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "exchange": self.scope.exchange,
            "channel": self.scope.channel,
            "phase": phase,
        }
        payload.update({key: value for key, value in extra.items() if value is not None})
        return payload

    def _log_info(self, message: str, phase: str, **extra: Any) -> None:
        self._logger.info(message, extra=self._scope_log_extra(phase, **extra))

    def _log_debug(self, message: str, phase: str, **extra: Any) -> None:
        self._logger.debug(message, extra=self._scope_log_extra(phase, **extra))

    def _log_warning(self, message: str, phase: str, **extra: Any) -> None:
        self._logger.warning(message, extra=self._scope_log_extra(phase, **extra))

    def _log_error(
        self, message: str, phase: str, exc_info: BaseException | None = None, **extra: Any
    ) -> None:
        self._logger.error(
            message, exc_info=exc_info, extra=self._scope_log_extra(phase, **extra)
        )
