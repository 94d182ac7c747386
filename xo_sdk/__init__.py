"""
Xen Orchestra SDK

Typed client for the Xen Orchestra management API over JSON-RPC 2.0, together
with a consumer-driven contract testing harness:

1. rpc: the Caller interface and its production HTTP implementation
2. contract: Pact-style mock provider, interaction registry and test transport
3. client: domain operations (users) built on any Caller
4. telemetry: OpenTelemetry tracing and metrics shared by all transports
"""

__version__ = "0.1.0"
