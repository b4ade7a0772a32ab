"""
SalesDesk Backend — Application Package Initializer
===================================================

What: Marks the `salesdesk` directory as a Python package.
Why:  Enables module imports like `from salesdesk.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is split into layers, each owning one concern:

    ┌─────────────────────────────────────┐
    │     Routes + Guard (API Layer)      │  ← HTTP concerns, auth header, body validation
    ├─────────────────────────────────────┤
    │      Services (Resource Handlers)   │  ← Existence / uniqueness checks, error mapping
    ├─────────────────────────────────────┤
    │        Stores (Persistence)         │  ← Parameterized SQL, one table per store
    ├─────────────────────────────────────┤
    │   Models & Schemas / Database       │  ← SQLAlchemy ORM, Pydantic, async sessions
    └─────────────────────────────────────┘

    Routes never touch SQL, services never touch HTTP objects, and stores
    never decide what a failure means to the client.
"""

__version__ = "1.0.0"
