"""
SmartTodo Backend - Application Package Initializer
====================================================

What: Marks the `smarttodo` directory as a Python package.
Who:  Used by uvicorn (smarttodo.main:app), Alembic and pytest.

Architecture Note:
    Every HTTP call is turned into a typed request and sent through one
    dispatch pipeline:

    ┌─────────────────────────────────────────────┐
    │  Routes (API Layer)                         │  ← build Request, call dispatch
    ├─────────────────────────────────────────────┤
    │  Exception Translator (middleware)          │  ← errors → Problem Details
    ├─────────────────────────────────────────────┤
    │  Pipeline: Dispatcher → Validation →        │
    │            Logging → Handler                │
    ├─────────────────────────────────────────────┤
    │  Services (handlers, validators, store)     │
    ├─────────────────────────────────────────────┤
    │  Models & Database (async SQLAlchemy)       │
    └─────────────────────────────────────────────┘
"""

__version__ = "1.0.0"
