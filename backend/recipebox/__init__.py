"""
RecipeBox Backend: Application Package Initializer
====================================================

What: Marks the `recipebox` directory as a Python package.
Who:  Used by uvicorn (`recipebox.main:app`), Alembic and pytest.

Architecture Note:
    The backend is split into the same layers throughout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Middleware (identity, request id) │  ← per-request cross-cutting work
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← validation, ownership, queries
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← async engine, sessions, seeding
    └─────────────────────────────────────┘

    Routes never touch SQL directly; services never build HTTP responses.
"""

__version__ = "1.0.0"
