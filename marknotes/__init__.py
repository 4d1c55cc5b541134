"""
MarkNotes Backend - Application Package
=======================================

What: Markdown notes REST service (storage, grammar check, HTML rendering).
Who:  Imported by uvicorn (`marknotes.main:app`), Alembic and pytest.

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← ownership, pagination, rendering
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes translate HTTP into service calls; services raise MarkNotesError
    subclasses which the handlers in main.py turn into JSON error bodies.
"""

__version__ = "1.0.0"
