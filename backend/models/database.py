"""
Declarative base for the DLD store schema.

The query layer never writes through these models. They document the table
the import process owns and let tests and local tooling build fixture stores.
"""
from sqlalchemy import MetaData
from sqlalchemy.orm import declarative_base

metadata = MetaData()

Base = declarative_base(metadata=metadata)


def create_schema(engine) -> None:
    """Create the transactions table and its indexes on `engine` (fixtures only)."""
    metadata.create_all(engine)
