"""
Configuration for the bit.ly client, CLI, and local stub API.
"""

import os

from dotenv import load_dotenv

load_dotenv()


# Credentials (only the CLI requires them; library callers pass their own)
BITLY_LOGIN = os.getenv("BITLY_LOGIN")
BITLY_API_KEY = os.getenv("BITLY_API_KEY")

# API Settings
BITLY_API_VERSION = os.getenv("BITLY_API_VERSION", "2.0.1")
BITLY_API_URL = os.getenv("BITLY_API_URL", "http://api.bit.ly").rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))

# App Settings
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "bitly.log")
DUMMY_API_PORT = int(os.getenv("DUMMY_API_PORT", "5002"))

if __name__ == "__main__":
    print(f"API URL: {BITLY_API_URL}")
    print(f"Version: {BITLY_API_VERSION}")
    print(f"Login: {BITLY_LOGIN}")
    # print(f"API Key set: {bool(BITLY_API_KEY)}")
