"""
Ordering key derivation and streaming comparison of two ordered row sources.

This submodule provides:
- order_key: OrderKey selection from catalog metadata
- row_source: cursor and in-memory row sources
- engine: the merge-join diff engine
- query: ordered SELECT construction and identifier quoting
"""

from .engine import Classification, DiffEngine, EngineState, compare_rows, compare_values
from .order_key import (
    Db2CatalogMetadata,
    MetadataProvider,
    OrderKey,
    OrderKeySelector,
    TableIdentity,
)
from .query import build_ordered_select, is_valid_identifier, quote_identifier, quote_table
from .row_source import CursorRowSource, RowSource, SequenceRowSource

__all__ = [
    'DiffEngine',
    'EngineState',
    'Classification',
    'compare_rows',
    'compare_values',
    'OrderKey',
    'OrderKeySelector',
    'MetadataProvider',
    'Db2CatalogMetadata',
    'TableIdentity',
    'RowSource',
    'CursorRowSource',
    'SequenceRowSource',
    'build_ordered_select',
    'is_valid_identifier',
    'quote_identifier',
    'quote_table',
]
