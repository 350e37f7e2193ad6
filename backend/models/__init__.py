"""
Models package - DLD store schema and read-side row types
"""
from models.database import Base, create_schema
from models.transaction import ROW_COLUMNS, ROW_SELECT_SQL, Transaction, TransactionRow

__all__ = [
    'Base',
    'create_schema',
    'ROW_COLUMNS',
    'ROW_SELECT_SQL',
    'Transaction',
    'TransactionRow',
]
