"""Shared pytest fixtures for contract tests."""

import pytest

from xo_sdk.contract import Pact


@pytest.fixture
def pact(tmp_path):
    """Fresh interaction registry per test; the mock server is always stopped afterwards."""
    pact = Pact(consumer="xo-sdk-py", provider="xenorchestra", pact_dir=str(tmp_path / "pacts"))
    yield pact
    pact.server.stop()
