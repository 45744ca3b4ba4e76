"""Configuration constants, scope sets, and .env loading.

WHY: Host names, API root paths, and OAuth scope sets are used by several
clients. Keeping them here means a region change or a new scope is a
one-line edit, not a hunt through the request code.

HOW: python-dotenv loads the .env file on import. Defaults are plain
module-level strings and lists; each can be overridden via environment
variables. load_credentials() gives a clear error when the app
credentials are missing.

RULES:
- Credentials are loaded from .env / environment, never hardcoded
- Scope lists are ordered; callers must not mutate them
- FORGE_DA_REGION selects the Design Automation root path
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Hosts and API root paths
# ---------------------------------------------------------------------------

FORGE_HOST = os.getenv("FORGE_HOST", "https://developer.api.autodesk.com")
FORGE_DA_REGION = os.getenv("FORGE_DA_REGION", "us-east")
FORGE_HTTP_TIMEOUT = float(os.getenv("FORGE_HTTP_TIMEOUT", "60"))

AUTH_PATH = "/authentication/v1/authenticate"
DESIGN_AUTOMATION_ROOT = "/da/{}/v3".format(FORGE_DA_REGION)
MODEL_DERIVATIVE_ROOT = "/modelderivative/v2"

# ---------------------------------------------------------------------------
# OAuth scope sets
# ---------------------------------------------------------------------------

DESIGN_AUTOMATION_SCOPES: list[str] = ["code:all"]
DATA_READ_SCOPES: list[str] = ["data:read"]
DATA_WRITE_SCOPES: list[str] = ["data:read", "data:write", "data:create"]


def load_credentials() -> tuple[str, str]:
    """Load the Forge app client ID and secret from the environment.

    RULES:
    - Raises ValueError if either value is missing or empty
    - Never returns a default/placeholder value
    """
    client_id = os.getenv("FORGE_CLIENT_ID", "").strip()
    client_secret = os.getenv("FORGE_CLIENT_SECRET", "").strip()
    if not client_id or not client_secret:
        raise ValueError(
            "Forge credentials not configured. "
            "Add FORGE_CLIENT_ID and FORGE_CLIENT_SECRET to the .env file."
        )
    return client_id, client_secret
