"""
Interaction registry

Holds the interactions a consumer test expects, serves them from a mock
provider and verifies that the observed traffic matched them exactly.

Typical use::

    pact = Pact(consumer="xo-sdk-py", provider="xenorchestra")
    pact.add_interaction() \\
        .given("No user exists") \\
        .upon_receiving("A request to create a user") \\
        .with_request(Request(method="POST", path="/api", ...)) \\
        .will_respond_with(Response(status=200, body="a1234abcd"))
    pact.verify(lambda: client.create_user(user))
    pact.teardown()
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Callable, List, Optional

from xo_sdk.config import MockProviderConfig
from xo_sdk.contract.dsl import Interaction, reify
from xo_sdk.contract.matching import ObservedRequest, match_request
from xo_sdk.contract.mock_server import MockServer, MockResponse
from xo_sdk.errors import VerificationError

logger = logging.getLogger(__name__)

PACT_SPECIFICATION_VERSION = "2.0.0"


class Pact:
    """
    Consumer-driven contract between one consumer and one provider
    Not safe to share between concurrently running tests: matching is stateful
    and follows registration order
    """

    def __init__(self,
                 consumer: str = "xo-sdk-py",
                 provider: str = "xenorchestra",
                 host: str = "127.0.0.1",
                 port: int = 0,
                 pact_dir: Optional[str] = None):
        """Initialize the registry

        Args:
            consumer: Consumer name, used in the pact file
            provider: Provider name, used in the pact file
            host: Mock server bind address
            port: Mock server port, 0 for a dynamically assigned one
            pact_dir: Directory the pact file is written to on teardown
        """
        self.consumer = consumer
        self.provider = provider
        self.host = host
        self.pact_dir = pact_dir
        self.interactions: List[Interaction] = []
        self.server = MockServer(self._handle_request, host=host, port=port)
        self._verified: List[Interaction] = []
        self._mismatches: List[str] = []
        self._lock = threading.Lock()
        self._torn_down = False

    @classmethod
    def from_config(cls, config: Optional[MockProviderConfig] = None) -> "Pact":
        """Create a registry from config (environment when omitted)"""
        config = config or MockProviderConfig.from_env()
        return cls(
            consumer=config.consumer,
            provider=config.provider,
            host=config.host,
            port=config.port,
            pact_dir=config.pact_dir,
        )

    def setup(self):
        """Start the mock server if it is not running yet

        Starting it again after teardown() makes the registry usable, and
        tear-downable, once more.
        """
        if not self.server.running:
            self.server.start()
            with self._lock:
                self._torn_down = False

    @property
    def port(self) -> int:
        """Port the mock server listens on; starts the server if needed"""
        self.setup()
        return self.server.port

    @property
    def base_url(self) -> str:
        self.setup()
        return self.server.base_url

    def add_interaction(self) -> Interaction:
        """Register a new interaction and return it for fluent configuration"""
        self.setup()
        interaction = Interaction()
        with self._lock:
            self.interactions.append(interaction)
        return interaction

    def _handle_request(self, observed: ObservedRequest) -> MockResponse:
        with self._lock:
            matching = []
            diffs = []
            for interaction in self.interactions:
                if not interaction.is_complete:
                    continue
                problems = match_request(interaction.request, observed)
                if problems:
                    diffs.append((interaction, problems))
                else:
                    matching.append(interaction)

            # Registration order decides; fresh interactions win over reused ones
            chosen = next((i for i in matching if not i.matched), matching[0] if matching else None)
            if chosen is not None:
                chosen.matched += 1
                logger.debug(f"Matched {observed.describe()} to '{chosen.description}'")
                return self._build_response(chosen)

            mismatch = f"Unexpected request {observed.describe()}"
            if diffs:
                closest, problems = min(diffs, key=lambda d: len(d[1]))
                mismatch += f", closest interaction '{closest.description}': {'; '.join(problems)}"
            self._mismatches.append(mismatch)

        logger.error(mismatch)
        body = {
            "message": f"No interaction found for {observed.describe()}",
            "interaction_diffs": [
                {"description": interaction.description, "problems": problems}
                for interaction, problems in diffs
            ],
        }
        return MockResponse(
            status=500,
            headers={"Content-Type": "application/json"},
            body=json.dumps(body).encode("utf-8"),
        )

    @staticmethod
    def _build_response(interaction: Interaction) -> MockResponse:
        expected = interaction.response
        headers = {name: str(value) for name, value in (reify(expected.headers) or {}).items()}
        body = b""
        if expected.body is not None:
            body = json.dumps(reify(expected.body)).encode("utf-8")
            if not any(name.lower() == "content-type" for name in headers):
                headers["Content-Type"] = "application/json"
        return MockResponse(status=expected.status, headers=headers, body=body)

    def _outstanding_problems(self) -> List[str]:
        problems = list(self._mismatches)
        for interaction in self.interactions:
            if not interaction.matched:
                request = interaction.request
                target = f"{request.method.upper()} {request.path}" if request else "no request"
                problems.append(f"Missing request for '{interaction.description}' ({target})")
        return problems

    def verify_mock(self):
        """Check the traffic seen so far against the registered interactions

        Raises:
            VerificationError: An interaction was not matched, or an unexpected
                or mismatched request was received
        """
        with self._lock:
            problems = self._outstanding_problems()
            if not problems:
                self._verified.extend(self.interactions)

        if problems:
            logger.error(f"Pact verification failed with {len(problems)} problem(s)")
            raise VerificationError(
                f"Pact verification failed between {self.consumer} and {self.provider}", problems
            )
        logger.info(f"Pact verification passed for {len(self._verified)} interaction(s)")

    def verify(self, test_fn: Callable[[], Any]) -> Any:
        """Run a consumer test against the mock provider and verify the traffic

        The registry is cleared once the traffic has been checked, so each test
        registers its own interactions. If test_fn raises, the interactions and
        any mismatched requests stay registered and teardown() reports them.

        Args:
            test_fn: The consumer code under test

        Returns:
            Whatever test_fn returned

        Raises:
            VerificationError: No interactions, incomplete interactions, or
                traffic that did not match
            Exception: Anything test_fn raised, unchanged
        """
        with self._lock:
            if not self.interactions:
                raise VerificationError("there are no interactions to be verified")
            incomplete = [i for i in self.interactions if not i.is_complete]
        if incomplete:
            raise VerificationError(
                "incomplete interactions registered",
                [f"'{i.description or '<no description>'}' needs a description, request and response"
                 for i in incomplete],
            )

        self.setup()
        result = test_fn()
        try:
            self.verify_mock()
            return result
        finally:
            with self._lock:
                self.interactions = []
                self._mismatches = []

    def teardown(self):
        """Verify anything still outstanding, write the pact file and stop the mock

        Safe to call more than once; later calls do nothing.

        Raises:
            VerificationError: Registered interactions were never matched, or
                unexpected requests were received since the last verification
        """
        with self._lock:
            if self._torn_down:
                return
            self._torn_down = True

        try:
            with self._lock:
                problems = self._outstanding_problems()
                if not problems:
                    self._verified.extend(self.interactions)
                self.interactions = []
                self._mismatches = []

            if not problems and self.pact_dir and self._verified:
                self.write_pact()
        finally:
            self.server.stop()

        if problems:
            logger.error(f"Pact teardown found {len(problems)} problem(s)")
            raise VerificationError(
                f"Pact teardown failed between {self.consumer} and {self.provider}", problems
            )

    def write_pact(self) -> Path:
        """Write the verified interactions as a Pact v2 JSON file

        Returns:
            Path: Location of the written file

        Raises:
            ValueError: No pact_dir configured
        """
        if not self.pact_dir:
            raise ValueError("pact_dir is not configured")

        unique = {}
        for interaction in self._verified:
            unique[(interaction.provider_state, interaction.description)] = interaction

        data = {
            "consumer": {"name": self.consumer},
            "provider": {"name": self.provider},
            "interactions": [interaction.to_pact() for interaction in unique.values()],
            "metadata": {"pactSpecification": {"version": PACT_SPECIFICATION_VERSION}},
        }

        filename = f"{self.consumer}-{self.provider}.json".lower().replace(" ", "_")
        path = Path(self.pact_dir) / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        logger.info(f"Pact file written to {path}")
        return path
