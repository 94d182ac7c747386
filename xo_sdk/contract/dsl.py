"""
Contract DSL

Building blocks for describing expected interactions: the request the
consumer will send, the response the mock provider returns, and flexible
matchers for values whose exact content does not matter.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from xo_sdk.rpc.codec import to_jsonable


class Matcher:
    """Base class for flexible matchers"""

    def example(self) -> Any:
        """Concrete value served by the mock and written to the pact file"""
        raise NotImplementedError


class Like(Matcher):
    """Matches any value of the same JSON type as the example"""

    def __init__(self, value: Any):
        self.value = value

    def example(self) -> Any:
        return reify(self.value)

    def __repr__(self):
        return f"Like({self.value!r})"


class EachLike(Matcher):
    """Matches an array of at least ``minimum`` items, each like the example"""

    def __init__(self, value: Any, minimum: int = 1):
        if minimum < 1:
            raise ValueError("EachLike minimum must be at least 1")
        self.value = value
        self.minimum = minimum

    def example(self) -> Any:
        return [reify(self.value) for _ in range(self.minimum)]

    def __repr__(self):
        return f"EachLike({self.value!r}, minimum={self.minimum})"


class Term(Matcher):
    """Matches a string against a regular expression"""

    def __init__(self, matcher: str, generate: str):
        if not re.fullmatch(matcher, generate):
            raise ValueError(f"example {generate!r} does not match {matcher!r}")
        self.matcher = matcher
        self.generate = generate

    def example(self) -> Any:
        return self.generate

    def __repr__(self):
        return f"Term({self.matcher!r}, {self.generate!r})"


def reify(value: Any) -> Any:
    """Replace every matcher in ``value`` with its example"""
    if isinstance(value, Matcher):
        return value.example()
    value = to_jsonable(value)
    if isinstance(value, dict):
        return {k: reify(v) for k, v in value.items()}
    if isinstance(value, list):
        return [reify(v) for v in value]
    return value


def matching_rules(value: Any, path: str = "$.body") -> Dict[str, Dict[str, Any]]:
    """Collect Pact v2 matching rules for the matchers inside ``value``"""
    rules = {}
    if isinstance(value, Like):
        rules[path] = {"match": "type"}
    elif isinstance(value, EachLike):
        rules[path] = {"min": value.minimum, "match": "type"}
        rules.update(matching_rules(value.value, f"{path}[*]"))
    elif isinstance(value, Term):
        rules[path] = {"match": "regex", "regex": value.matcher}
    elif isinstance(value, dict):
        for k, v in value.items():
            rules.update(matching_rules(v, f"{path}.{k}"))
    elif isinstance(value, (list, tuple)):
        for i, v in enumerate(value):
            rules.update(matching_rules(v, f"{path}[{i}]"))
    return rules


@dataclass
class Request:
    """Expected request; headers and body may contain matchers"""
    method: str
    path: str
    query: Optional[Dict[str, Any]] = None
    headers: Optional[Dict[str, Any]] = None
    body: Any = None

    def to_pact(self) -> Dict[str, Any]:
        data = {"method": self.method.upper(), "path": self.path}
        if self.query is not None:
            data["query"] = reify(self.query)
        if self.headers:
            data["headers"] = reify(self.headers)
        if self.body is not None:
            data["body"] = reify(self.body)
        rules = {}
        if self.headers:
            for name, value in self.headers.items():
                rules.update(matching_rules(value, f"$.headers.{name}"))
        rules.update(matching_rules(self.body))
        if rules:
            data["matchingRules"] = rules
        return data


@dataclass
class Response:
    """Response served by the mock provider"""
    status: int = 200
    headers: Optional[Dict[str, Any]] = None
    body: Any = None

    def to_pact(self) -> Dict[str, Any]:
        data = {"status": self.status}
        if self.headers:
            data["headers"] = reify(self.headers)
        if self.body is not None:
            data["body"] = reify(self.body)
        rules = matching_rules(self.body)
        if rules:
            data["matchingRules"] = rules
        return data


@dataclass
class Interaction:
    """A single expected request/response pair

    Built fluently from ``Pact.add_interaction()``::

        pact.add_interaction() \\
            .given("No user exists") \\
            .upon_receiving("A request to create a user") \\
            .with_request(Request(...)) \\
            .will_respond_with(Response(...))
    """
    provider_state: Optional[str] = None
    description: Optional[str] = None
    request: Optional[Request] = None
    response: Optional[Response] = None
    matched: int = field(default=0, compare=False)

    def given(self, provider_state: str) -> "Interaction":
        self.provider_state = provider_state
        return self

    def upon_receiving(self, description: str) -> "Interaction":
        self.description = description
        return self

    def with_request(self, request: Request) -> "Interaction":
        self.request = request
        return self

    def will_respond_with(self, response: Response) -> "Interaction":
        self.response = response
        return self

    @property
    def is_complete(self) -> bool:
        return bool(self.description) and self.request is not None and self.response is not None

    def to_pact(self) -> Dict[str, Any]:
        data = {"description": self.description}
        if self.provider_state:
            data["providerState"] = self.provider_state
        data["request"] = self.request.to_pact()
        data["response"] = self.response.to_pact()
        return data
