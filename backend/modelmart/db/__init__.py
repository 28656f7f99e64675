"""Database Infrastructure — declarative bases for the record and ledger stores.

Invariants:
    - One async engine per store per process (initialized via init_stores)
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL in production, aiosqlite in tests
"""
