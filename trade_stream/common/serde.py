from datetime import datetime
from decimal import Decimal
from typing import Any, Callable

import orjson

JSONDefault = Callable[[Any], Any]
Serializer = Callable[[Any], bytes]


def default_json_encoder(obj: Any) -> Any:
    """JSON 직렬화 헬퍼.

    - Decimal -> str
    - datetime -> ISO 8601
    - 그 외: str()로 폴백
    """
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    return str(obj)


def to_bytes(value: Any, default: JSONDefault | None = None) -> bytes:
    """객체를 UTF-8 JSON bytes(orjson)로 직렬화."""
    return orjson.dumps(value, default=default or default_json_encoder)


def to_pretty_str(value: Any) -> str:
    """들여쓰기(2칸) JSON 문자열로 직렬화 (콘솔 출력용)."""
    return orjson.dumps(
        value, default=default_json_encoder, option=orjson.OPT_INDENT_2
    ).decode("utf-8")
