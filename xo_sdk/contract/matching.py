"""
Request matching

Compares a request observed by the mock provider with an expected Request and
lists every difference. An empty list means the request matches.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

from xo_sdk.contract.dsl import Matcher, Like, EachLike, Term, Request
from xo_sdk.rpc.codec import to_jsonable


@dataclass
class ObservedRequest:
    """A request as received by the mock provider; header names are lowercase"""
    method: str
    path: str
    query: Dict[str, List[str]] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def describe(self) -> str:
        return f"{self.method} {self.path}"


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _match_type(example: Any, actual: Any, path: str) -> List[str]:
    """Type-only comparison used by Like and EachLike; extra object keys are allowed"""
    if isinstance(example, Matcher):
        return match_value(example, actual, path)
    example = to_jsonable(example)
    if _json_type(example) != _json_type(actual):
        return [f"{path}: expected {_json_type(example)}, got {_json_type(actual)}"]
    problems = []
    if isinstance(example, dict):
        for key, value in example.items():
            if key not in actual:
                problems.append(f"{path}.{key}: missing")
            else:
                problems.extend(_match_type(value, actual[key], f"{path}.{key}"))
    elif isinstance(example, list) and example:
        for i, item in enumerate(actual):
            problems.extend(_match_type(example[0], item, f"{path}[{i}]"))
    return problems


def match_value(expected: Any, actual: Any, path: str = "$") -> List[str]:
    """Compare a parsed JSON value against an expectation that may hold matchers"""
    if isinstance(expected, Like):
        return _match_type(expected.value, actual, path)

    if isinstance(expected, EachLike):
        if not isinstance(actual, list):
            return [f"{path}: expected array, got {_json_type(actual)}"]
        if len(actual) < expected.minimum:
            return [f"{path}: expected at least {expected.minimum} item(s), got {len(actual)}"]
        problems = []
        for i, item in enumerate(actual):
            problems.extend(_match_type(expected.value, item, f"{path}[{i}]"))
        return problems

    if isinstance(expected, Term):
        if not isinstance(actual, str):
            return [f"{path}: expected string matching /{expected.matcher}/, got {_json_type(actual)}"]
        if not re.fullmatch(expected.matcher, actual):
            return [f"{path}: {actual!r} does not match /{expected.matcher}/"]
        return []

    expected = to_jsonable(expected)

    if isinstance(expected, dict):
        if not isinstance(actual, dict):
            return [f"{path}: expected object, got {_json_type(actual)}"]
        problems = []
        for key, value in expected.items():
            if key not in actual:
                problems.append(f"{path}.{key}: missing")
            else:
                problems.extend(match_value(value, actual[key], f"{path}.{key}"))
        for key in actual:
            if key not in expected:
                problems.append(f"{path}.{key}: unexpected key")
        return problems

    if isinstance(expected, list):
        if not isinstance(actual, list):
            return [f"{path}: expected array, got {_json_type(actual)}"]
        if len(expected) != len(actual):
            return [f"{path}: expected {len(expected)} item(s), got {len(actual)}"]
        problems = []
        for i, (e, a) in enumerate(zip(expected, actual)):
            problems.extend(match_value(e, a, f"{path}[{i}]"))
        return problems

    if _json_type(expected) != _json_type(actual) or expected != actual:
        return [f"{path}: expected {expected!r}, got {actual!r}"]
    return []


def _normalize_query(query: Dict[str, Any]) -> Dict[str, List[str]]:
    normalized = {}
    for key, value in query.items():
        values = value if isinstance(value, (list, tuple)) else [value]
        normalized[key] = [str(v) for v in values]
    return normalized


def match_request(expected: Request, observed: ObservedRequest) -> List[str]:
    """List the differences between an expected and an observed request

    Args:
        expected: Registered request expectation
        observed: Request received by the mock provider

    Returns:
        List[str]: One line per mismatch, empty when the request matches
    """
    problems = []

    if expected.method.upper() != observed.method.upper():
        problems.append(f"method: expected {expected.method.upper()}, got {observed.method.upper()}")

    if expected.path != observed.path:
        problems.append(f"path: expected {expected.path}, got {observed.path}")

    if expected.query is not None and _normalize_query(expected.query) != observed.query:
        problems.append(f"query: expected {_normalize_query(expected.query)}, got {observed.query}")

    for name, value in (expected.headers or {}).items():
        actual = observed.headers.get(name.lower())
        if actual is None:
            problems.append(f"header {name}: expected {value!r} but it was missing")
        elif isinstance(value, Matcher):
            problems.extend(match_value(value, actual, f"header {name}"))
        elif str(value).strip() != actual.strip():
            problems.append(f"header {name}: expected {value!r}, got {actual!r}")

    if expected.body is not None:
        if not observed.body:
            problems.append("body: expected a body but none was sent")
        else:
            try:
                actual_body = json.loads(observed.body)
            except ValueError:
                problems.append("body: not valid JSON")
            else:
                problems.extend(match_value(expected.body, actual_body, "$.body"))

    return problems
