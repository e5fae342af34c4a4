"""Generic document operations over the ``document`` table.

The entity repositories never issue SQL themselves; they go through
DocumentStore, which owns the session handling, the batch-size limits and
the translation of SQLAlchemy failures into BackendError.

Batch limits mirror what managed document databases impose. Callers pass
any number of items; chunking happens here and all chunks of one call share
a single transaction, so a bulk call either fully applies or fails.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any, TypeVar

from sqlalchemy import insert, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select

from casebook.errors import BackendError
from casebook.repository.document.tables import CounterRow, DocumentRow

logger = logging.getLogger(__name__)

WRITE_BATCH_LIMIT = 500  # documents per write/delete batch
GET_BATCH_LIMIT = 10  # documents per batched get
IN_FILTER_LIMIT = 20  # values per IN filter

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


class DocumentStore:
    """JSON documents grouped into named collections.

    Usage:
        store = DocumentStore(engine, prefix="test")
        coll = store.collection("case", "ws1")
        store.put(coll, "1", {"title": "C1"})
        store.get(coll, "1")  # {"title": "C1"}
    """

    def __init__(self, engine: Engine, prefix: str = "") -> None:
        self._engine = engine
        self._prefix = prefix

    def collection(self, kind: str, *scope: Any) -> str:
        """Collection name for ``kind``; scope parts (workspace, case) are appended."""
        base = f"{self._prefix}_{kind}" if self._prefix else kind
        return "/".join([base, *(str(part) for part in scope)])

    @contextmanager
    def session(self, operation: str, collection: str) -> Iterator[Session]:
        try:
            with Session(self._engine) as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Document store %s failed on %s: %s", operation, collection, exc)
            raise BackendError(
                "document store operation failed",
                operation=operation,
                collection=collection,
            ) from exc

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @staticmethod
    def _row(session: Session, collection: str, doc_id: str) -> DocumentRow | None:
        return session.exec(
            select(DocumentRow).where(
                DocumentRow.collection == collection,
                DocumentRow.doc_id == doc_id,
            )
        ).first()

    @staticmethod
    def _rows(session: Session, collection: str, doc_ids: Sequence[str]) -> list[DocumentRow]:
        rows: list[DocumentRow] = []
        for chunk in chunked(doc_ids, GET_BATCH_LIMIT):
            rows.extend(
                session.exec(
                    select(DocumentRow).where(
                        DocumentRow.collection == collection,
                        col(DocumentRow.doc_id).in_(chunk),
                    )
                ).all()
            )
        return rows

    def get(self, collection: str, doc_id: str) -> dict | None:
        with self.session("get", collection) as session:
            row = self._row(session, collection, doc_id)
            return dict(row.data) if row is not None else None

    def get_many(self, collection: str, doc_ids: Iterable[str]) -> dict[str, dict]:
        """Fetch documents by ID; missing IDs are absent from the result."""
        wanted = list(dict.fromkeys(doc_ids))
        if not wanted:
            return {}
        with self.session("get_many", collection) as session:
            return {row.doc_id: dict(row.data) for row in self._rows(session, collection, wanted)}

    def scan(self, collection: str) -> list[dict]:
        """All documents of a collection in insertion order."""
        with self.session("scan", collection) as session:
            rows = session.exec(
                select(DocumentRow)
                .where(DocumentRow.collection == collection)
                .order_by(col(DocumentRow.seq))
            ).all()
            return [dict(row.data) for row in rows]

    def scan_refs(self, collection: str, refs: Iterable[Any]) -> list[dict]:
        """Documents whose ``ref`` is one of ``refs``, in insertion order."""
        wanted = list(dict.fromkeys(str(r) for r in refs))
        if not wanted:
            return []
        found: list[DocumentRow] = []
        with self.session("scan_refs", collection) as session:
            for chunk in chunked(wanted, IN_FILTER_LIMIT):
                found.extend(
                    session.exec(
                        select(DocumentRow).where(
                            DocumentRow.collection == collection,
                            col(DocumentRow.ref).in_(chunk),
                        )
                    ).all()
                )
            found.sort(key=lambda row: row.seq)
            return [dict(row.data) for row in found]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def put(self, collection: str, doc_id: str, data: dict, ref: Any = "", move_to_end: bool = False) -> None:
        """Upsert one document.

        An existing document keeps its insertion sequence unless
        ``move_to_end`` is set, in which case it is re-inserted as the newest.
        """
        with self.session("put", collection) as session:
            if move_to_end:
                row = self._row(session, collection, doc_id)
                if row is not None:
                    session.delete(row)
                    session.flush()
            self._upsert(session, collection, doc_id, data, ref)
            session.commit()

    @staticmethod
    def _upsert(session: Session, collection: str, doc_id: str, data: dict, ref: Any) -> None:
        row = DocumentStore._row(session, collection, doc_id)
        if row is None:
            session.add(DocumentRow(collection=collection, doc_id=doc_id, ref=str(ref), data=data))
        else:
            row.data = data
            row.ref = str(ref)
            session.add(row)

    def put_many(self, collection: str, docs: Iterable[tuple[str, dict, Any]]) -> int:
        """Upsert ``(doc_id, data, ref)`` triples in WRITE_BATCH_LIMIT chunks, one transaction."""
        batch = list(docs)
        if not batch:
            return 0
        with self.session("put_many", collection) as session:
            for chunk in chunked(batch, WRITE_BATCH_LIMIT):
                existing = {row.doc_id: row for row in self._rows(session, collection, [d[0] for d in chunk])}
                for doc_id, data, ref in chunk:
                    row = existing.get(doc_id)
                    if row is None:
                        row = DocumentRow(collection=collection, doc_id=doc_id, ref=str(ref), data=data)
                        existing[doc_id] = row
                    else:
                        row.data = data
                        row.ref = str(ref)
                    session.add(row)
                session.flush()
            session.commit()
        logger.info("Wrote %d documents to %s", len(batch), collection)
        return len(batch)

    def update(
        self,
        collection: str,
        doc_id: str,
        mutate: Callable[[dict], dict],
        ref: Any = None,
    ) -> dict | None:
        """Replace an existing document with ``mutate(current)``.

        Returns the new document, or None (nothing written) if it does not
        exist. Read and write happen in one transaction. ``ref`` replaces the
        secondary key when given.
        """
        with self.session("update", collection) as session:
            row = self._row(session, collection, doc_id)
            if row is None:
                return None
            data = mutate(dict(row.data))
            row.data = data
            if ref is not None:
                row.ref = str(ref)
            session.add(row)
            session.commit()
            return data

    def insert_if_absent(self, collection: str, doc_id: str, data: dict, ref: Any = "") -> bool:
        """Write only when no document with ``doc_id`` exists. Returns True if written."""
        with self.session("insert_if_absent", collection) as session:
            if self._row(session, collection, doc_id) is not None:
                return False
            session.add(DocumentRow(collection=collection, doc_id=doc_id, ref=str(ref), data=data))
            try:
                session.commit()
            except IntegrityError:
                # a concurrent writer inserted the same document first
                session.rollback()
                return False
            return True

    def delete(self, collection: str, doc_id: str) -> bool:
        with self.session("delete", collection) as session:
            row = self._row(session, collection, doc_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    def delete_where(self, collection: str, predicate: Callable[[dict], bool]) -> int:
        """Delete every document matching ``predicate``, batched, in one transaction."""
        with self.session("delete_where", collection) as session:
            rows = session.exec(select(DocumentRow).where(DocumentRow.collection == collection)).all()
            doomed = [row for row in rows if predicate(row.data)]
            self._delete_rows(session, doomed)
            session.commit()
            return len(doomed)

    def delete_refs(self, collection: str, ref: Any) -> int:
        with self.session("delete_refs", collection) as session:
            rows = session.exec(
                select(DocumentRow).where(
                    DocumentRow.collection == collection,
                    DocumentRow.ref == str(ref),
                )
            ).all()
            self._delete_rows(session, list(rows))
            session.commit()
            return len(rows)

    def delete_collection(self, collection: str) -> int:
        return self.delete_where(collection, lambda _: True)

    @staticmethod
    def _delete_rows(session: Session, rows: Sequence[DocumentRow]) -> None:
        for chunk in chunked(rows, WRITE_BATCH_LIMIT):
            for row in chunk:
                session.delete(row)
            session.flush()

    # ------------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------------

    def next_id(self, collection: str) -> int:
        """Atomically increment and return the collection's counter (starts at 1).

        The increment is a single ``UPDATE ... RETURNING`` so concurrent
        callers never observe the same value. A missing counter is created
        at 1; losing that insert race retries the update.
        """
        counter = CounterRow.__table__
        bump = (
            update(counter)
            .where(counter.c.collection == collection)
            .values(value=counter.c.value + 1)
            .returning(counter.c.value)
        )
        with self.session("next_id", collection) as session:
            while True:
                value = session.connection().execute(bump).scalar_one_or_none()
                if value is None:
                    try:
                        session.connection().execute(insert(counter).values(collection=collection, value=1))
                    except IntegrityError:
                        session.rollback()
                        continue
                    value = 1
                session.commit()
                return value
