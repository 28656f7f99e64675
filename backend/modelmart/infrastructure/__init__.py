"""Infrastructure Layer — store adapters, identity verification and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All external failures mapped to typed errors from core/errors.py

Design Decisions:
    - Adapters implement the Protocols in core/repository_protocols.py
      structurally; nothing here subclasses them
"""
