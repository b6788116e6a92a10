#!/usr/bin/env python3
"""
Check the Google Custom Search credentials used by the chat backend.
Sends one test query and prints troubleshooting hints when it fails.
"""

import os
import re
import sys
from pathlib import Path

import requests
from dotenv import load_dotenv

SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
TEST_QUERY = "real estate property test"

HINTS = {
    403: [
        "Your API key is invalid or lacks permission",
        "1. Make sure the API key is correct",
        "2. Enable the Custom Search API in the Google Cloud Console",
        "3. Make sure billing is enabled on the account",
    ],
    400: [
        "Invalid request parameters",
        "Make sure GOOGLE_SEARCH_ENGINE_ID (cx) is correct",
    ],
    429: [
        "Daily API quota exceeded",
        "The free tier is limited to 100 queries per day",
    ],
}


def load_env():
    root = Path(__file__).resolve().parent
    for env_file in (root / ".env", root / "backend" / ".env"):
        if env_file.exists():
            load_dotenv(dotenv_path=env_file, override=False)


def main() -> int:
    load_env()
    api_key = os.getenv("GOOGLE_API_KEY", "")
    engine_id = os.getenv("GOOGLE_SEARCH_ENGINE_ID", "")
    match = re.search(r"cx=([^&]+)", engine_id)
    if match:
        engine_id = match.group(1)

    print("\n=== Environment ===")
    print(f"GOOGLE_API_KEY: {'Set' if api_key else 'Not Set'}")
    print(f"GOOGLE_SEARCH_ENGINE_ID: {'Set' if engine_id else 'Not Set'}")

    if not api_key or not engine_id:
        print("\nERROR: set GOOGLE_API_KEY and GOOGLE_SEARCH_ENGINE_ID in your .env file")
        return 1

    print("\n=== Google Search API test ===")
    print("Sending test query...")

    try:
        resp = requests.get(
            SEARCH_URL,
            params={"key": api_key, "cx": engine_id, "q": TEST_QUERY, "num": 3},
            timeout=10,
        )
    except requests.RequestException as e:
        print(f"\nERROR: no response from Google Search API - possible network issue ({e})")
        return 1

    if resp.status_code != 200:
        print(f"\nERROR: Google Search API call failed (status {resp.status_code})")
        try:
            print(f"Message: {resp.json().get('error', {}).get('message', resp.text)}")
        except ValueError:
            print(f"Message: {resp.text[:500]}")
        for line in HINTS.get(resp.status_code, []):
            print(line)
        return 1

    items = resp.json().get("items") or []
    if not items:
        print("\nWARNING: API responded but returned no results")
        print(resp.text[:1000])
        return 1

    print(f"\nSUCCESS: Google Search API is working, {len(items)} results")
    print(f"First result: {items[0].get('title')}")
    print(f"Link: {items[0].get('link')}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
