"""Persistent filter cache.

All mixins compose into the FilterStore class via multiple inheritance.
The MRO ensures ConnectionBase.__init__ runs and then
SchemaMixin._ensure_schema() creates the tables and seeds the filters.
"""

from __future__ import annotations

from gamesincommon.core.db.connection import ConnectionBase
from gamesincommon.core.db.filter_queries import FilterQueryMixin
from gamesincommon.core.db.schema import SchemaMixin

__all__ = ["FilterStore"]


class FilterStore(
    SchemaMixin,
    FilterQueryMixin,
    ConnectionBase,
):
    """Filter cache database composing the query mixins.

    Inherits connection management from ConnectionBase, schema handling
    from SchemaMixin and the cache queries from FilterQueryMixin.
    """

    pass
