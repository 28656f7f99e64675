"""Listing Query — normalizes catalog filters and pagination.

Invariants:
    - Results are always ordered newest first (created_at desc)
    - category "All" (any case) or empty means no category filter
    - latest=true without an explicit limit caps the page at LATEST_LIMIT
"""

from dataclasses import dataclass


LATEST_LIMIT: int = 6


@dataclass(frozen=True)
class ListingQuery:
    developer_email: str | None = None
    category: str | None = None
    skip: int = 0
    limit: int | None = None


def build_listing_query(
    email: str | None = None,
    category: str | None = None,
    latest: bool = False,
    skip: int = 0,
    limit: int | None = None,
    latest_limit: int = LATEST_LIMIT,
) -> ListingQuery:
    """Translate raw query parameters into a store-level ListingQuery."""
    if category is not None and (not category.strip() or category.lower() == "all"):
        category = None
    if latest and limit is None:
        limit = latest_limit
    return ListingQuery(
        developer_email=email or None,
        category=category,
        skip=max(skip, 0),
        limit=limit,
    )
