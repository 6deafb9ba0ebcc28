from trade_stream.core.types._exception_types import (
    ErrorCategory,
    ErrorCode,
    ErrorDomain,
    ExceptionGroup,
    RuleKind,
)
from trade_stream.core.types._trade_types import (
    PAIRS_LIST,
    ChannelID,
    Pair,
    SubscriptionToken,
    TradeSide,
)

__all__ = [
    # _exception_types
    "ErrorDomain",
    "ErrorCode",
    "ErrorCategory",
    "ExceptionGroup",
    "RuleKind",
    # _trade_types
    "Pair",
    "TradeSide",
    "PAIRS_LIST",
    "ChannelID",
    "SubscriptionToken",
]
