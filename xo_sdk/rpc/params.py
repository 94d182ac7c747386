"""
Per-method parameter records

Each known XO method has a record describing its parameter shape. The generic
``call(method, params)`` signature still accepts plain dicts; when the method
is known those dicts are checked against its record before anything is sent.
"""

from dataclasses import dataclass, asdict, fields, is_dataclass
from typing import Any, Dict, Optional

from xo_sdk.errors import SerializationError
from xo_sdk.rpc.codec import to_jsonable


@dataclass
class SignInParams:
    email: str
    password: str


@dataclass
class UserCreateParams:
    email: str
    password: str


@dataclass
class UserGetAllParams:
    # user.getAll is always sent with a placeholder parameter object
    dummy: str = "dummy"


@dataclass
class UserSetParams:
    id: str
    email: Optional[str] = None
    password: Optional[str] = None


@dataclass
class UserDeleteParams:
    id: str


METHOD_PARAMS = {
    "session.signInWithPassword": SignInParams,
    "user.create": UserCreateParams,
    "user.getAll": UserGetAllParams,
    "user.set": UserSetParams,
    "user.delete": UserDeleteParams,
}


def _record_to_dict(record: Any) -> Dict[str, Any]:
    return {k: to_jsonable(v) for k, v in asdict(record).items() if v is not None}


def encode_params(method: str, params: Any) -> Any:
    """Turn call parameters into a JSON-ready value
    
    Args:
        method: Method name, used to look up the expected record
        params: None, a parameter record, a dict, or any JSON-ready value
        
    Returns:
        JSON-ready parameters, or None when params is None
        
    Raises:
        SerializationError: The params do not fit the method's record
    """
    if params is None:
        return None
    
    record_type = METHOD_PARAMS.get(method)
    
    if is_dataclass(params) and not isinstance(params, type):
        if record_type is not None and not isinstance(params, record_type):
            raise SerializationError(
                f"{method} expects {record_type.__name__}, got {type(params).__name__}", method
            )
        return _record_to_dict(params)
    
    if record_type is not None and isinstance(params, dict):
        allowed = {f.name for f in fields(record_type)}
        unknown = set(params) - allowed
        if unknown:
            raise SerializationError(
                f"{method} got unexpected parameters: {', '.join(sorted(unknown))}", method
            )
        try:
            record = record_type(**params)
        except TypeError as e:
            raise SerializationError(f"invalid parameters for {method}: {e}", method) from e
        return _record_to_dict(record)
    
    return to_jsonable(params)
