"""Forge API client package: async HTTP access to the Forge services.

WHY: Authentication, pagination and per-service request shapes are the
same plumbing for every caller. This package owns all of it.

HOW: Transport wraps httpx.AsyncClient; AuthenticationClient issues
scoped tokens; PaginatedFetcher walks cursor-linked listings; the
service clients combine the three.

RULES:
- All HTTP calls go through Transport (no direct httpx usage elsewhere)
- Every request carries a Bearer token for the scopes it needs
"""

from forge_client.api.auth import AuthenticationClient, AuthProvider, OwnerAuthProvider, Token
from forge_client.api.design_automation import DesignAutomationClient
from forge_client.api.model_derivative import ModelDerivativeClient
from forge_client.api.pagination import Page, PaginatedFetcher
from forge_client.api.transport import Transport
from forge_client.errors import (
    ActivityValidationError,
    AuthenticationError,
    ForgeError,
    TransportError,
)

__all__ = [
    "ActivityValidationError",
    "AuthenticationClient",
    "AuthenticationError",
    "AuthProvider",
    "DesignAutomationClient",
    "ForgeError",
    "ModelDerivativeClient",
    "OwnerAuthProvider",
    "Page",
    "PaginatedFetcher",
    "Token",
    "Transport",
    "TransportError",
]
