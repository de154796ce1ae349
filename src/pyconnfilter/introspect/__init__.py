"""Catalog introspection for computed column filtering.

Load a :class:`~pyconnfilter.catalog.Catalog` from a live database connection.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pyconnfilter.catalog import Catalog

__all__ = [
    "introspect",
    "introspect_postgres",
]


def introspect(
    dialect_name: str,
    conn: Any,
    **kwargs: Any,
) -> Catalog:
    """Introspect a catalog from a live database connection.

    Dispatches to the dialect-specific introspection function based on
    ``dialect_name``.

    Args:
        dialect_name: Dialect name (``"postgresql"``).
        conn: A database connection.
        **kwargs: Forwarded to the dialect-specific function (e.g.
            ``schema_names`` for PostgreSQL).

    Returns:
        The introspected :class:`~pyconnfilter.catalog.Catalog`.

    Raises:
        IntrospectionError: If introspection fails.
        ValueError: If the dialect name is unknown.
    """
    if dialect_name == "postgresql":
        from pyconnfilter.introspect.postgres import introspect_postgres

        return introspect_postgres(conn, **kwargs)

    raise ValueError(
        f"unknown dialect: {dialect_name!r}. "
        f"Available: postgresql"
    )


def __getattr__(name: str) -> Any:
    """Lazy re-exports of per-dialect introspection functions."""
    if name == "introspect_postgres":
        from pyconnfilter.introspect.postgres import introspect_postgres

        return introspect_postgres
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
