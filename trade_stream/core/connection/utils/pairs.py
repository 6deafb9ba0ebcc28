"""거래쌍 ↔ Poloniex 채널 식별자 레지스트리.

- 송신: Pair → 구독 토큰 ("USDT_BTC")
- 수신: 메시지 선두 채널 ID ("121") → Pair
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from trade_stream.common.exceptions import UndefinedPairError, UndefinedPairIDError
from trade_stream.core.types import ChannelID, Pair, SubscriptionToken

POLONIEX_SUBSCRIPTION_TOKENS: Mapping[Pair, SubscriptionToken] = MappingProxyType(
    {
        Pair.BTC_USDT: "USDT_BTC",
        Pair.TRX_USDT: "USDT_TRX",
        Pair.ETH_USDT: "USDT_ETH",
    }
)

POLONIEX_CHANNEL_IDS: Mapping[ChannelID, Pair] = MappingProxyType(
    {
        "121": Pair.BTC_USDT,
        "265": Pair.TRX_USDT,
        "149": Pair.ETH_USDT,
    }
)


@dataclass(slots=True, frozen=True, eq=False, repr=False, match_args=False)
class PairRegistry:
    """거래쌍 양방향 매핑 (불변).

    생성 시 두 매핑이 같은 거래쌍 집합 위의 전단사(bijection)인지 검증합니다.
    프로세스 시작 시 한 번 만들어지고 이후 변경되지 않습니다.
    """

    tokens: Mapping[Pair, SubscriptionToken]
    channel_ids: Mapping[ChannelID, Pair]
    _channel_by_pair: Mapping[Pair, ChannelID] = field(init=False)

    def __post_init__(self) -> None:
        tokens = dict(self.tokens)
        channel_ids = dict(self.channel_ids)

        if Pair.INVALID in tokens or Pair.INVALID in channel_ids.values():
            raise ValueError("Pair.INVALID cannot be registered")
        if len(set(tokens.values())) != len(tokens):
            raise ValueError("subscription tokens must be unique per pair")

        channel_by_pair = {pair: channel_id for channel_id, pair in channel_ids.items()}
        if len(channel_by_pair) != len(channel_ids):
            raise ValueError("channel ids must map to distinct pairs")
        if set(channel_by_pair) != set(tokens):
            raise ValueError(
                "token map and channel id map must cover the same pairs: "
                f"{sorted(tokens)} != {sorted(channel_by_pair)}"
            )

        # frozen dataclass이므로 object.__setattr__로 읽기 전용 뷰를 고정
        object.__setattr__(self, "tokens", MappingProxyType(tokens))
        object.__setattr__(self, "channel_ids", MappingProxyType(channel_ids))
        object.__setattr__(self, "_channel_by_pair", MappingProxyType(channel_by_pair))

    @property
    def pairs(self) -> tuple[Pair, ...]:
        """등록된 거래쌍 (선언 순서)"""
        return tuple(self.tokens)

    def subscription_token(self, pair: Pair) -> SubscriptionToken:
        """Pair → 구독 토큰 (닫힌 집합 위의 전함수)

        Raises:
            UndefinedPairError: 등록되지 않은 거래쌍(센티넬 포함)
        """
        try:
            return self.tokens[pair]
        except KeyError:
            raise UndefinedPairError(str(pair)) from None

    def pair_from_channel_id(self, channel_id: ChannelID) -> Pair:
        """채널 ID → Pair

        Raises:
            UndefinedPairIDError: 알 수 없는 채널 ID (프로토콜/설정 불일치)
        """
        pair = self.channel_ids.get(channel_id)
        if pair is None:
            raise UndefinedPairIDError(channel_id)
        return pair

    def channel_id(self, pair: Pair) -> ChannelID:
        """Pair → 채널 ID (역방향 조회)"""
        try:
            return self._channel_by_pair[pair]
        except KeyError:
            raise UndefinedPairError(str(pair)) from None

    def __repr__(self) -> str:
        return f"PairRegistry(pairs={[str(p) for p in self.pairs]})"


# Module-level 싱글톤 인스턴스 (eager initialization)
_registry = PairRegistry(
    tokens=POLONIEX_SUBSCRIPTION_TOKENS,
    channel_ids=POLONIEX_CHANNEL_IDS,
)


def default_pair_registry() -> PairRegistry:
    """Poloniex 기본 레지스트리 싱글톤 반환."""
    return _registry
