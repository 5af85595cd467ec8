"""
Events BFF — Application Package Initializer
=============================================

What: Marks the `events_bff` directory as a Python package.
Why:  Enables module imports like `from events_bff.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    This backend-for-frontend follows a thin layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Pass-through)     │  ← Session → upstream arguments
    ├─────────────────────────────────────┤
    │     Integrations (Upstream APIs)    │  ← URL composition per upstream
    ├─────────────────────────────────────┤
    │        HTTP Client (Core)           │  ← Validation, casing, logging
    └─────────────────────────────────────┘

    Nothing is persisted. Every request lives for exactly one upstream round trip.
"""

__version__ = "1.0.0"
