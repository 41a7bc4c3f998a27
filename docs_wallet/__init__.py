"""
Docs Wallet Backend — Application Package
==========================================

What: Document-storage API. Authenticated users upload images to an
      S3-compatible bucket and keep their metadata, profile and "works"
      records in a relational database.
Who:  Imported by uvicorn (``docs_wallet.main:app``), Alembic and pytest.

Layering:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Access Guard (bearer token gate)  │  ← identity claim per request
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← upload workflow, owner scoping
    ├─────────────────────────────────────┤
    │  Models & Schemas │ Object Store    │  ← SQLAlchemy ORM, Pydantic, S3
    ├─────────────────────────────────────┤
    │   AppContext (long-lived handles)   │  ← engine, sessions, bucket client
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
