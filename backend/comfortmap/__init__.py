"""
ComfortMap Backend — Application Package Initializer
====================================================

What: Marks the `comfortmap` directory as a Python package.
Why:  Enables module imports like `from comfortmap.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows the same layered split as every other piece of the app:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (review text, store,     │  ← Encoding/decoding, persistence
    │   board, geocoding)                 │    orchestration, presentation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The browser frontend lives in `comfortmap/static/` and is served as-is.
"""

__version__ = "1.0.0"
