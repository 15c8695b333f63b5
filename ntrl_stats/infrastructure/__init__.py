"""Infrastructure Layer — store, span source client, and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All external calls wrapped with timeout/error mapping onto core/errors.py

Design Decisions:
    - Thin adapters implementing core/repository_protocols.py
"""
