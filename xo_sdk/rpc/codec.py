"""
JSON conversion helpers

Converts domain values (dataclasses, records) to JSON-ready structures and
decodes parsed JSON back into the result type a caller asked for.
"""

from dataclasses import asdict, is_dataclass
from typing import Any, Dict, List, Union, get_args, get_origin

from xo_sdk.errors import DecodeError


def to_jsonable(value: Any) -> Any:
    """Convert a value to plain dicts, lists and scalars

    Objects exposing ``to_dict()`` use it; other dataclasses go through
    ``dataclasses.asdict``. Values json cannot handle are returned untouched
    so the encoder reports them.
    """
    if hasattr(value, "to_dict") and callable(value.to_dict):
        return value.to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or str(tp)


def _decode(data: Any, result_type: Any, path: str) -> Any:
    if result_type is Any or result_type is object:
        return data

    origin = get_origin(result_type)
    if origin is Union:
        args = get_args(result_type)
        if data is None and type(None) in args:
            return None
        errors = []
        for arg in args:
            if arg is type(None):
                continue
            try:
                return _decode(data, arg, path)
            except DecodeError as e:
                errors.append(str(e))
        raise DecodeError(f"{path}: no member of {result_type} fits ({'; '.join(errors)})")

    if origin in (list, List):
        if not isinstance(data, list):
            raise DecodeError(f"{path}: expected array, got {type(data).__name__}")
        (item_type,) = get_args(result_type) or (Any,)
        return [_decode(item, item_type, f"{path}[{i}]") for i, item in enumerate(data)]

    if origin in (dict, Dict):
        if not isinstance(data, dict):
            raise DecodeError(f"{path}: expected object, got {type(data).__name__}")
        args = get_args(result_type)
        value_type = args[1] if len(args) == 2 else Any
        return {k: _decode(v, value_type, f"{path}.{k}") for k, v in data.items()}

    if result_type is bool:
        if not isinstance(data, bool):
            raise DecodeError(f"{path}: expected boolean, got {type(data).__name__}")
        return data
    if result_type is int:
        if isinstance(data, bool) or not isinstance(data, int):
            raise DecodeError(f"{path}: expected integer, got {type(data).__name__}")
        return data
    if result_type is float:
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            raise DecodeError(f"{path}: expected number, got {type(data).__name__}")
        return float(data)
    if result_type in (str, dict, list):
        if not isinstance(data, result_type):
            raise DecodeError(
                f"{path}: expected {_type_name(result_type)}, got {type(data).__name__}"
            )
        return data

    if isinstance(result_type, type) and (hasattr(result_type, "from_dict") or is_dataclass(result_type)):
        if not isinstance(data, dict):
            raise DecodeError(
                f"{path}: expected object for {_type_name(result_type)}, got {type(data).__name__}"
            )
        try:
            if hasattr(result_type, "from_dict"):
                return result_type.from_dict(data)
            return result_type(**data)
        except (TypeError, KeyError, ValueError) as e:
            raise DecodeError(f"{path}: cannot build {_type_name(result_type)}: {e}") from e

    if callable(result_type):
        try:
            return result_type(data)
        except (TypeError, KeyError, ValueError) as e:
            raise DecodeError(f"{path}: cannot build {_type_name(result_type)}: {e}") from e

    raise DecodeError(f"{path}: unsupported result type {result_type!r}")


def decode_result(data: Any, result_type: Any) -> Any:
    """Decode parsed JSON into ``result_type``

    Supported targets: ``Any``, bool/int/float/str/dict/list, ``List[X]``,
    ``Dict[str, X]``, ``Optional[X]``, classes with ``from_dict``, plain
    dataclasses and any other one-argument callable.

    Raises:
        DecodeError: data does not have the requested shape
    """
    return _decode(data, result_type, "$")
