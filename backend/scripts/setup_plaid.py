#!/usr/bin/env python3
"""Plaid credential setup.

Checks a client_id/secret pair by asking Plaid for a link token, then
offers to save the pair in the OS keychain. Bank linking itself happens
in the browser through Plaid Link.

Usage:
    cd backend && python scripts/setup_plaid.py
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from integrations.exceptions import ProviderError
from integrations.plaid_client import PlaidClient
from services.credential_manager import set_credential

ENVIRONMENT_CHOICES = {"1": "sandbox", "2": "production"}


def validate_credentials(client_id: str, secret: str, environment: str) -> str:
    """Return a link token if Plaid accepts the credentials.

    Raises:
        ProviderError: If Plaid rejects the request.
    """
    client = PlaidClient(client_id=client_id, secret=secret, environment=environment)
    return client.create_link_token(user_id="setup-check")


def offer_keychain_store(credentials: dict[str, str]) -> None:
    """Ask whether to save credentials in the keychain and do it."""
    answer = input("\nStore these credentials in the OS keychain? [Y/n] ").strip().lower()
    if answer not in ("", "y", "yes"):
        print("  Skipped keychain storage.")
        return
    for key, value in credentials.items():
        if set_credential(key, value):
            print(f"  Stored {key} in keychain")
        else:
            print(f"  Failed to store {key}")


def main():
    print("Plaid API Setup")
    print("=" * 50)
    print()
    print("Get your client_id and secret from https://dashboard.plaid.com/ (Developers > Keys).")
    print()

    client_id = input("Enter your Plaid client_id: ").strip()
    if not client_id:
        print("Error: No client_id provided")
        sys.exit(1)

    secret = input("Enter your Plaid secret: ").strip()
    if not secret:
        print("Error: No secret provided")
        sys.exit(1)

    print()
    print("Choose environment:")
    print("  1. sandbox (test data)")
    print("  2. production")
    choice = input("Enter choice (1 or 2) [1]: ").strip() or "1"
    environment = ENVIRONMENT_CHOICES.get(choice, "sandbox")

    print()
    print(f"Validating credentials against {environment}...")
    try:
        validate_credentials(client_id, secret, environment)
    except ProviderError as e:
        print(f"Error: {e}")
        print("Check the client_id/secret pair and that it matches the chosen environment.")
        sys.exit(1)

    print()
    print("Success! Credentials are valid.")
    print(f"Set PLAID_ENVIRONMENT={environment} in your .env file.")

    offer_keychain_store({"PLAID_CLIENT_ID": client_id, "PLAID_SECRET": secret})


if __name__ == "__main__":
    main()
