"""Forge client: async access to Design Automation and Model Derivative.

WHY: The Forge REST APIs are verbose: every call needs a scoped token,
listings are split into cursor-linked pages, and each CAD engine wants
its activity command line written in its own dialect. This package hides
those details behind a couple of typed async clients.

HOW: Two layers:
  api/   transport, authentication, pagination and the per-service clients
  core/  pure builders (engine ids, activity descriptors, work items)
The core layer never touches the network, so every descriptor can be
validated before a single request is made.

RULES:
- All HTTP goes through api.transport.Transport
- Listings are paginated through api.pagination.PaginatedFetcher
- Builders in core/ are pure and raise before any network call
"""

__version__ = "0.1.0"
