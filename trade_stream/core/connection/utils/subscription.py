"""구독 메시지 준비 유틸리티."""

from __future__ import annotations

from trade_stream.common.serde import to_bytes
from trade_stream.core.connection.utils.pairs import PairRegistry
from trade_stream.core.dto.io.commands import SubscribeCommandDTO
from trade_stream.core.types import Pair


def new_subscribe_cmd(channel: str) -> bytes:
    """구독 토큰 → {"command": "subscribe", "channel": ...} JSON bytes"""
    command = SubscribeCommandDTO(channel=channel)
    return to_bytes(command.model_dump(mode="json"))


def build_subscribe_cmds(registry: PairRegistry, pairs: list[Pair]) -> list[bytes]:
    """거래쌍 목록 → 거래쌍별 구독 메시지 (입력 순서 유지)

    Raises:
        UndefinedPairError: 레지스트리에 없는 거래쌍
    """
    return [new_subscribe_cmd(registry.subscription_token(pair)) for pair in pairs]
