"""
Health Diary Backend — Application Package Initializer
======================================================

What: Marks the `healthdiary` directory as a Python package.
Why:  Enables module imports like `from healthdiary.config import settings`.
Who:  Used by Alembic, pytest, uvicorn and the client end-to-end tests.

Layering:
    ┌─────────────────────────────────────┐
    │   Routes (auth, users, entries)     │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (ownership, hashing)     │  ← Business rules
    ├─────────────────────────────────────┤
    │   Models & Schemas                  │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database                          │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
