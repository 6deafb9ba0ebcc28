"""Poloniex 푸시 메시지 Trade 파서.

메시지 형식 (https://docs.poloniex.com/#price-aggregated-book):
    [<channel-id>, <seq>, [["o", ...], ["t", "<id>", <side>, "<price>", "<amount>", <ts>, "<ts_ms>"], ...]]

최상위가 JSON으로 보장되지 않으므로(수신 버퍼가 프레임 중간에서 잘릴 수 있음)
json 파싱 대신 한 번의 선형 스캔으로 trade 블록만 찾아냅니다.
"""

from __future__ import annotations

from datetime import datetime, timezone

from trade_stream.common.exceptions import TradeFieldFormatError
from trade_stream.core.connection.utils.pairs import PairRegistry, default_pair_registry
from trade_stream.core.connection.utils.trades.side import decode_side
from trade_stream.core.dto.internal.trade import TradeRecord
from trade_stream.core.types import Pair

TRADE_CHAR = "t"
BLOCK_END_CHAR = "]"
DELIM_CHAR = ","

# 't' 마커 뒤의 닫는 따옴표와 쉼표를 건너뛰어 첫 필드로 이동
TRADE_FIELDS_SKIP = 3
TRADE_FIELD_COUNT = 5

# 숫자 구분자('1_000')는 거래소 숫자 형식이 아님
DIGIT_SEPARATOR = "_"


def _trim_quotes(raw: str) -> str:
    return raw.strip().strip('"')


def _reject_digit_separator(field: str, raw: str, value: str) -> None:
    if DIGIT_SEPARATOR in value:
        raise TradeFieldFormatError(field, raw, "digit separator not allowed")


def _parse_float(field: str, raw: str) -> float:
    value = _trim_quotes(raw)
    _reject_digit_separator(field, raw, value)
    try:
        return float(value)
    except ValueError as e:
        raise TradeFieldFormatError(field, raw, str(e)) from e


def _parse_timestamp(raw: str) -> datetime:
    value = raw.strip()
    _reject_digit_separator("timestamp", raw, value)
    try:
        seconds = int(value)
    except ValueError as e:
        raise TradeFieldFormatError("timestamp", raw, str(e)) from e
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise TradeFieldFormatError("timestamp", raw, str(e)) from e


class PoloniexTradeParser:
    """Poloniex Trade 파서 (메시지 간 상태 없음).

    특징:
    - 단일 좌→우 스캔, 출력 리스트 외 추가 메모리 없음
    - 앞/뒤가 잘린 trade 조각은 조용히 버림 (스트리밍 버퍼 경계)
    - 필드 오류는 메시지 전체 디코딩을 중단 (부분 결과 폐기)
    """

    def __init__(self, registry: PairRegistry | None = None) -> None:
        self._registry = registry or default_pair_registry()

    @property
    def registry(self) -> PairRegistry:
        return self._registry

    def parse(self, message: str) -> list[TradeRecord]:
        """메시지 하나에서 체결 레코드를 순서대로 추출.

        Args:
            message: 원본 메시지 (문자열)

        Returns:
            체결 레코드 리스트 (trade 블록이 없으면 빈 리스트)

        Raises:
            TradeDecodeError: 채널 ID/체결 방향/필드 형식 오류 (메시지 전체 폐기)
        """
        records: list[TradeRecord] = []
        start_index = 0
        channel_id: str | None = None

        for i, char in enumerate(message):
            if char == DELIM_CHAR and channel_id is None and i > 1:
                # 첫 번째 정수 값이 채널(거래쌍) ID
                channel_id = message[1:i].strip()

            if char == TRADE_CHAR:
                start_index = i + TRADE_FIELDS_SKIP

            elif char == BLOCK_END_CHAR and start_index != 0 and i > start_index:
                raw_fields = message[start_index:i].split(DELIM_CHAR)
                records.append(self._build_record(raw_fields, channel_id or ""))
                start_index = 0

        return records

    def _build_record(self, raw_fields: list[str], channel_id: str) -> TradeRecord:
        """trade 블록의 원시 필드 → TradeRecord.

        채널 ID를 가장 먼저 해석하므로, 알 수 없는 채널이면
        다른 필드의 유효성과 무관하게 UndefinedPairIDError가 발생합니다.
        """
        pair: Pair = self._registry.pair_from_channel_id(channel_id)

        if len(raw_fields) < TRADE_FIELD_COUNT:
            raise TradeFieldFormatError(
                "trade",
                DELIM_CHAR.join(raw_fields),
                f"expected {TRADE_FIELD_COUNT} fields, got {len(raw_fields)}",
            )

        raw_id, raw_side, raw_price, raw_amount, raw_ts = raw_fields[:TRADE_FIELD_COUNT]

        return TradeRecord(
            id=_trim_quotes(raw_id).strip(),
            pair=pair,
            side=decode_side(raw_side.strip()),
            price=_parse_float("price", raw_price),
            amount=_parse_float("amount", raw_amount),
            timestamp=_parse_timestamp(raw_ts),
        )


# Module-level 싱글톤 인스턴스 (기본 레지스트리)
_parser = PoloniexTradeParser()


def get_poloniex_trade_parser() -> PoloniexTradeParser:
    """기본 레지스트리를 사용하는 Poloniex Trade 파서 싱글톤 반환."""
    return _parser
