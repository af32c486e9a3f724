"""
Client entrypoint: prints the dashboard for the current phase.

Operator notes:
- Talks to CLIENT_API_BASE (default http://127.0.0.1:8000).
- Optional first argument: a user id to sign in with through the local login shim
  (the API must run with DEV_LOGIN=true).
"""

import logging
import sys

from class_election.client import ApiError, ElectionClient
from class_election.client.views import load_dashboard


def main() -> None:
    logging.basicConfig(level=logging.WARNING)
    with ElectionClient.from_settings() as client:
        try:
            if len(sys.argv) > 1:
                client.login(sys.argv[1], first_name=sys.argv[2] if len(sys.argv) > 2 else None)
            print(load_dashboard(client))
        except ApiError as e:
            print(f"\n❌ API error ({e.status_code}): {e.message}")
            print("   Is the API running? Check CLIENT_API_BASE.\n")
            sys.exit(1)


if __name__ == "__main__":
    main()
