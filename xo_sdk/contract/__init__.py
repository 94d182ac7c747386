"""
Contract Testing Module

Consumer-driven contract testing against a mocked XO provider:
- dsl: expected requests, responses and flexible matchers
- pact: interaction registry, verification and pact file output
- mock_server: aiohttp mock provider running on a background thread
- transport: Caller implementation that talks to the mock provider
"""

from .dsl import Request, Response, Interaction, Like, EachLike, Term
from .pact import Pact
from .transport import ContractCaller

__all__ = [
    "Request",
    "Response",
    "Interaction",
    "Like",
    "EachLike",
    "Term",
    "Pact",
    "ContractCaller"
]
