"""Service Layer — imperative shell around the pure core.

Invariants:
    - Services depend on store Protocols, never on a concrete adapter
    - All IO happens here or below; decisions come from core/

Design Decisions:
    - One class per workflow (catalog, purchase) constructed per request
      from injected stores
"""
