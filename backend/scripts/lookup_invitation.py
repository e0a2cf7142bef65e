"""
Look up an invitation letter from the command line (support script).

Drives the same form controller as the web page against a running server:
input is reduced to digits, checked for length, then POSTed to /api/search.

Usage (from backend/):
  python -m scripts.lookup_invitation --phone 0912345678
  python -m scripts.lookup_invitation --phone "091 234 5678" --base-url http://localhost:8001
"""

import asyncio
import argparse
import sys
import os
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from services.lookup_form import LookupForm, create_client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:8001"


async def lookup(phone: str, base_url: str) -> bool:
    """Run one search. Returns True if a record was found."""
    async with create_client(base_url) as client:
        form = LookupForm(client)
        form.paste(phone)
        await form.submit()

    if form.error:
        logger.warning("Lookup failed for %s: %s", form.phone_number or phone, form.error)
        return False

    record = form.result
    print(f"Name:   {record.name or ''}")
    print(f"Email:  {record.email or ''}")
    print(f"Phone:  {record.phoneNumber or ''}")
    if record.letterURL:
        print(f"Letter: {record.letterURL}")
    return True


def main():
    parser = argparse.ArgumentParser(description="Find an invitation letter by phone number")
    parser.add_argument("--phone", required=True, help="10-digit phone number; separators are ignored")
    parser.add_argument(
        "--base-url",
        default=os.environ.get("LOOKUP_BASE_URL", DEFAULT_BASE_URL),
        help="Server base URL (default: LOOKUP_BASE_URL or %(default)s)",
    )
    args = parser.parse_args()
    found = asyncio.run(lookup(args.phone, args.base_url))
    sys.exit(0 if found else 1)


if __name__ == "__main__":
    main()
