"""SQL tables backing the document store.

Every entity is one JSON document in ``document``. ``collection`` names one
logical collection per entity kind per workspace (``{prefix}_{kind}/{ws}``),
``seq`` is the insertion sequence used to break recency ties, and ``ref``
holds the single secondary key a collection is filtered by (the owning
case ID for actions and knowledge, for instance).
"""

from __future__ import annotations

from sqlalchemy import UniqueConstraint
from sqlmodel import JSON, Column, SQLModel
from sqlmodel import Field as SQLField


class DocumentRow(SQLModel, table=True):
    __tablename__ = "document"
    __table_args__ = (UniqueConstraint("collection", "doc_id", name="uq_document_collection_doc"),)

    seq: int | None = SQLField(default=None, primary_key=True)
    collection: str = SQLField(index=True)
    doc_id: str
    ref: str = SQLField(default="", index=True)
    data: dict = SQLField(default_factory=dict, sa_column=Column(JSON))


class CounterRow(SQLModel, table=True):
    """Auto-increment counter per collection (relational IDs)."""

    __tablename__ = "counter"

    collection: str = SQLField(primary_key=True)
    value: int = 0
