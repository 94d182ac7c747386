"""
Tests for request matching and matchers
"""
import json

import pytest

from xo_sdk.contract.dsl import Request, Response, Like, EachLike, Term, reify, matching_rules
from xo_sdk.contract.matching import ObservedRequest, match_request, match_value


def observed(body=None, headers=None, method="POST", path="/api", query=None):
    return ObservedRequest(
        method=method,
        path=path,
        query=query or {},
        headers={k.lower(): v for k, v in (headers if headers is not None else {"Content-Type": "application/json"}).items()},
        body=json.dumps(body).encode("utf-8") if body is not None else b"",
    )


CREATE_REQUEST = Request(
    method="POST",
    path="/api",
    headers={"Content-Type": "application/json"},
    body={
        "method": "user.create",
        "params": {"email": "ddelnano", "password": "password"},
        "id": 0,
        "jsonrpc": "2.0",
    },
)


class TestMatchRequest:
    """Test comparison of expected and observed requests"""

    def test_exact_match(self):
        assert match_request(CREATE_REQUEST, observed(reify(CREATE_REQUEST.body))) == []

    def test_header_names_are_case_insensitive(self):
        request = observed(reify(CREATE_REQUEST.body), headers={"content-type": "application/json"})
        assert match_request(CREATE_REQUEST, request) == []

    def test_missing_content_type(self):
        """Test a request without Content-Type does not match"""
        problems = match_request(CREATE_REQUEST, observed(reify(CREATE_REQUEST.body), headers={}))
        assert problems == ["header Content-Type: expected 'application/json' but it was missing"]

    def test_extra_headers_are_allowed(self):
        headers = {"Content-Type": "application/json", "traceparent": "00-abc-def-01"}
        assert match_request(CREATE_REQUEST, observed(reify(CREATE_REQUEST.body), headers=headers)) == []

    def test_method_and_path(self):
        problems = match_request(CREATE_REQUEST, observed(reify(CREATE_REQUEST.body), method="GET", path="/rpc"))
        assert "method: expected POST, got GET" in problems
        assert "path: expected /api, got /rpc" in problems

    def test_body_differences(self):
        body = dict(reify(CREATE_REQUEST.body), method="user.getAll", extra=1)
        problems = match_request(CREATE_REQUEST, observed(body))
        assert "$.body.method: expected 'user.create', got 'user.getAll'" in problems
        assert "$.body.extra: unexpected key" in problems

    def test_missing_body(self):
        assert match_request(CREATE_REQUEST, observed(None)) == ["body: expected a body but none was sent"]

    def test_query(self):
        request = Request(method="GET", path="/users", query={"limit": 10})
        assert match_request(request, observed(method="GET", path="/users", query={"limit": ["10"]})) == []
        assert match_request(request, observed(method="GET", path="/users", query={})) != []


class TestMatchers:
    """Test flexible matchers"""

    def test_like_matches_type(self):
        assert match_value(Like({"id": "x", "count": 1}), {"id": "other", "count": 5, "more": True}) == []
        assert match_value(Like("x"), 1) == ["$: expected string, got number"]

    def test_each_like(self):
        matcher = EachLike({"id": "a1234abcd"}, minimum=2)
        assert match_value(matcher, [{"id": "1"}, {"id": "2"}, {"id": "3"}]) == []
        assert match_value(matcher, [{"id": "1"}]) == ["$: expected at least 2 item(s), got 1"]
        assert match_value(matcher, [{"id": 1}, {"id": "2"}]) == ["$[0].id: expected string, got number"]

    def test_term(self):
        matcher = Term(r"[a-f0-9]+", "a1234abcd")
        assert match_value(matcher, "deadbeef") == []
        assert match_value(matcher, "xyz") != []

    def test_term_example_must_match(self):
        with pytest.raises(ValueError):
            Term(r"\d+", "abc")

    def test_exact_booleans_are_not_numbers(self):
        assert match_value(True, 1) != []

    def test_reify_and_rules(self):
        body = {"id": Term(r"\w+", "a1234abcd"), "users": EachLike({"email": Like("ddelnano")})}
        assert reify(body) == {"id": "a1234abcd", "users": [{"email": "ddelnano"}]}
        assert matching_rules(body) == {
            "$.body.id": {"match": "regex", "regex": r"\w+"},
            "$.body.users": {"min": 1, "match": "type"},
            "$.body.users[*].email": {"match": "type"},
        }

    def test_response_to_pact(self):
        response = Response(status=200, headers={"Content-Type": "application/json"}, body="a1234abcd")
        assert response.to_pact() == {
            "status": 200,
            "headers": {"Content-Type": "application/json"},
            "body": "a1234abcd",
        }
