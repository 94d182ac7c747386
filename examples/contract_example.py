#!/usr/bin/env python
"""
Contract Example

Demonstrates running the user client against a mock XO provider through the
caller factory, then writing the resulting pact file.
"""

import logging
import tempfile

from xo_sdk.client import Client, User
from xo_sdk.contract import Pact, Request, Response
from xo_sdk.errors import VerificationError
from xo_sdk.rpc.caller_factory import CallerFactory, TransportType

def setup_logging():
    """Setup logging configuration"""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

def main():
    """Run main example flow"""
    setup_logging()

    pact_dir = tempfile.mkdtemp(prefix="pacts-")
    pact = Pact(consumer="xo-sdk-py", provider="xenorchestra", pact_dir=pact_dir)
    client = Client(CallerFactory.create(TransportType.CONTRACT, {"pact": pact}))

    pact.add_interaction() \
        .given("No user exists") \
        .upon_receiving("A request to create ddelnano") \
        .with_request(Request(
            method="POST",
            path="/api",
            headers={"Content-Type": "application/json"},
            body={
                "method": "user.create",
                "params": {"email": "ddelnano", "password": "password"},
                "id": 0,
                "jsonrpc": "2.0",
            },
        )) \
        .will_respond_with(Response(
            status=200,
            headers={"Content-Type": "application/json"},
            body="a1234abcd",
        ))

    try:
        user = pact.verify(lambda: client.create_user(User(email="ddelnano", password="password")))
        print(f"✅ Created user {user.email} with id {user.id}")
    except VerificationError as e:
        print(f"❌ Verification failed: {e}")
    finally:
        client.close()

    print(f"Pact files written to {pact_dir}")

if __name__ == "__main__":
    main()
