"""
Interaction registry tests

Drive the mock provider with plain HTTP requests and check verification,
teardown and pact file output.
"""
import json
import threading

import httpx
import pytest

from xo_sdk.config import MockProviderConfig
from xo_sdk.contract import Pact, Request, Response, Like
from xo_sdk.errors import VerificationError

CREATE_BODY = {
    "method": "user.create",
    "params": {"email": "ddelnano", "password": "password"},
    "id": 0,
    "jsonrpc": "2.0",
}


def register_create(pact):
    pact.add_interaction() \
        .given("No user exists") \
        .upon_receiving("A request to create ddelnano") \
        .with_request(Request(
            method="POST",
            path="/api",
            headers={"Content-Type": "application/json"},
            body=CREATE_BODY,
        )) \
        .will_respond_with(Response(
            status=200,
            headers={"Content-Type": "application/json"},
            body="a1234abcd",
        ))


def post(pact, body, headers=None):
    with httpx.Client(trust_env=False) as client:
        return client.post(
            f"{pact.base_url}/api",
            content=json.dumps(body).encode("utf-8"),
            headers=headers,
        )


class TestMockProvider:
    """Test the mock server side of the registry"""

    def test_dynamic_port(self, pact):
        """Test port 0 is replaced by the port the OS assigned"""
        assert pact.port > 0
        assert pact.base_url == f"http://127.0.0.1:{pact.port}"

    def test_matched_request_gets_response(self, pact):
        register_create(pact)
        response = post(pact, CREATE_BODY, {"Content-Type": "application/json"})
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        assert response.json() == "a1234abcd"

    def test_unmatched_request_gets_500(self, pact):
        register_create(pact)
        response = post(pact, dict(CREATE_BODY, method="user.delete"), {"Content-Type": "application/json"})
        assert response.status_code == 500
        payload = response.json()
        assert payload["message"] == "No interaction found for POST /api"
        assert payload["interaction_diffs"][0]["description"] == "A request to create ddelnano"

    def test_interaction_can_match_again(self, pact):
        register_create(pact)
        for _ in range(2):
            assert post(pact, CREATE_BODY, {"Content-Type": "application/json"}).status_code == 200


class TestVerify:
    """Test Pact.verify"""

    def test_verify_passes(self, pact):
        register_create(pact)
        result = pact.verify(lambda: post(pact, CREATE_BODY, {"Content-Type": "application/json"}).json())
        assert result == "a1234abcd"
        assert pact.interactions == []

    def test_missing_content_type_fails_verification(self, pact):
        """Test a request without Content-Type is reported as a mismatch"""
        register_create(pact)
        with pytest.raises(VerificationError) as exc_info:
            pact.verify(lambda: post(pact, CREATE_BODY))
        message = str(exc_info.value)
        assert "Unexpected request POST /api" in message
        assert "header Content-Type: expected 'application/json' but it was missing" in message
        assert "Missing request for 'A request to create ddelnano'" in message

    def test_no_interactions(self, pact):
        with pytest.raises(VerificationError, match="no interactions to be verified"):
            pact.verify(lambda: None)

    def test_incomplete_interaction(self, pact):
        pact.add_interaction().given("No user exists")
        with pytest.raises(VerificationError, match="incomplete interactions"):
            pact.verify(lambda: None)

    def test_missing_request(self, pact):
        register_create(pact)
        with pytest.raises(VerificationError, match="Missing request"):
            pact.verify(lambda: None)

    def test_test_errors_propagate(self, pact):
        """Test exceptions from the consumer test are not replaced"""
        register_create(pact)

        def failing_test():
            raise RuntimeError("consumer blew up")

        with pytest.raises(RuntimeError, match="consumer blew up"):
            pact.verify(failing_test)
        assert len(pact.interactions) == 1
        with pytest.raises(VerificationError, match="Missing request"):
            pact.teardown()

    def test_verification_error_is_an_assertion(self):
        assert issubclass(VerificationError, AssertionError)


class TestTeardown:
    """Test Pact.teardown and pact file output"""

    def test_teardown_writes_pact_file(self, pact, tmp_path):
        register_create(pact)
        pact.verify(lambda: post(pact, CREATE_BODY, {"Content-Type": "application/json"}))
        pact.teardown()

        path = tmp_path / "pacts" / "xo-sdk-py-xenorchestra.json"
        contract = json.loads(path.read_text(encoding="utf-8"))
        assert contract["consumer"] == {"name": "xo-sdk-py"}
        assert contract["provider"] == {"name": "xenorchestra"}
        assert contract["metadata"]["pactSpecification"]["version"] == "2.0.0"
        interaction = contract["interactions"][0]
        assert interaction["providerState"] == "No user exists"
        assert interaction["request"]["body"] == CREATE_BODY
        assert interaction["response"]["body"] == "a1234abcd"
        assert not pact.server.running

    def test_teardown_reports_unmatched(self, pact):
        register_create(pact)
        with pytest.raises(VerificationError, match="Missing request"):
            pact.teardown()
        assert not pact.server.running

    def test_teardown_twice(self, pact):
        """Test a second teardown raises nothing new"""
        register_create(pact)
        with pytest.raises(VerificationError):
            pact.teardown()
        pact.teardown()

    def test_concurrent_teardown_reports_once(self, pact):
        register_create(pact)
        barrier = threading.Barrier(4)
        failures = []

        def teardown():
            barrier.wait()
            try:
                pact.teardown()
            except VerificationError as e:
                failures.append(e)

        threads = [threading.Thread(target=teardown) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(failures) == 1
        assert not pact.server.running

    def test_setup_after_teardown(self, pact):
        """Test a restarted registry can be verified and torn down again"""
        pact.setup()
        pact.teardown()
        assert not pact.server.running

        register_create(pact)
        assert pact.server.running
        with pytest.raises(VerificationError, match="Missing request"):
            pact.teardown()
        assert not pact.server.running

    def test_matching_rules_in_pact_file(self, pact, tmp_path):
        pact.add_interaction() \
            .upon_receiving("A request to create anyone") \
            .with_request(Request(
                method="POST",
                path="/api",
                headers={"Content-Type": "application/json"},
                body=dict(CREATE_BODY, params={"email": Like("someone"), "password": Like("secret")}),
            )) \
            .will_respond_with(Response(body=Like("a1234abcd")))
        pact.verify(lambda: post(pact, CREATE_BODY, {"Content-Type": "application/json"}))
        path = pact.write_pact()

        request = json.loads(path.read_text(encoding="utf-8"))["interactions"][0]["request"]
        assert request["body"]["params"] == {"email": "someone", "password": "secret"}
        assert request["matchingRules"] == {
            "$.body.params.email": {"match": "type"},
            "$.body.params.password": {"match": "type"},
        }

    def test_write_pact_needs_directory(self):
        with pytest.raises(ValueError, match="pact_dir"):
            Pact().write_pact()


class TestFromConfig:
    """Test building the registry from configuration"""

    def test_from_config(self, tmp_path):
        config = MockProviderConfig(consumer="c", provider="p", pact_dir=str(tmp_path))
        pact = Pact.from_config(config)
        assert (pact.consumer, pact.provider, pact.pact_dir) == ("c", "p", str(tmp_path))
        assert pact.server.port == 0
