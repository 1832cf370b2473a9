from .conn import QueryHelper
from .descriptor import ConnectionDescriptor
from .statement import Statement, strip_numeric_keys, key_by_first_column

__all__ = [
    'QueryHelper', 'ConnectionDescriptor', 'Statement',
    'strip_numeric_keys', 'key_by_first_column'
]
