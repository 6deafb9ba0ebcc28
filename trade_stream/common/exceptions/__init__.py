from trade_stream.common.exceptions.errors import (
    InvalidTradeTypeError,
    SubscriptionError,
    TradeDecodeError,
    TradeFieldFormatError,
    UndefinedPairError,
    UndefinedPairIDError,
)

__all__ = [
    "TradeDecodeError",
    "UndefinedPairIDError",
    "UndefinedPairError",
    "InvalidTradeTypeError",
    "TradeFieldFormatError",
    "SubscriptionError",
]
