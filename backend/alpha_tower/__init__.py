"""
Alpha Tower Sales System — Application Package
================================================

What: Backend for the Alpha Tower sales system (products, users, sessions).
Who:  Imported by uvicorn (`alpha_tower.main:create_app`), Alembic and pytest.

Architecture Note:
    The backend is split into thin layers, each a 1:1 pass-through to the next:

    ┌─────────────────────────────────────┐
    │      Routes (controllers + router)  │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │    Services (one class per use case)│  ← uniqueness / existence rules
    ├─────────────────────────────────────┤
    │   Repositories (memory | SQLAlchemy)│  ← lookup, save, remove
    ├─────────────────────────────────────┤
    │        Models (mapped records)      │  ← Product, User
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
