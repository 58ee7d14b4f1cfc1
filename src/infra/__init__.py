"""Infrastructure layer package.

Implements Port interfaces with concrete adapters (PostgreSQL via SQLAlchemy).
src/authz and src/session MUST NOT import from this package directly; the
composition root in src/main.py injects the adapters.
"""
