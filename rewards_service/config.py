"""
config.py — Environment Settings for the Rewards Service

All settings are read once from environment variables at import time.
Only the port override is load-bearing for the server; the auth token is a
placeholder for the (stubbed) third-party rewards integration.
"""

import os
from pathlib import Path

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "catalog.json"

# Server
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "3001"))
CATALOG_PATH = Path(os.environ.get("CATALOG_PATH", str(DEFAULT_CATALOG_PATH)))

# Orders API (used by the portal-side client)
REWARDS_API_BASE_URL = os.environ.get("REWARDS_API_BASE_URL", "http://localhost:3001/api")
REWARDS_API_AUTH_TOKEN = os.environ.get("REWARDS_API_AUTH_TOKEN", "your-auth-token-here")
CUSTOMER_IDENTIFIER = os.environ.get("REWARDS_CUSTOMER_ID", "kyron-hr-customer")
ACCOUNT_IDENTIFIER = os.environ.get("REWARDS_ACCOUNT_ID", "kyron-hr-main-account")

# Logging
LOG_FILE = os.environ.get("LOG_FILE", "rewards_service.log")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
