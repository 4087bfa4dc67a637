from __future__ import annotations

import logging

from sqlalchemy import delete, exists, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from quotes_api.domain.errors import Conflict, InvalidInput, NotFound, StorageFailure
from quotes_api.models.quote import Quote

_LOG = logging.getLogger("quotes_api.storage")


class QuoteStorage:
    """SQL gateway for the ``quotes`` table.

    Every public method runs parameterized statements through the given
    session. Backend errors are rolled back, logged with the operation name
    and re-raised as :class:`StorageFailure`.
    """

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, operation: str, exc: SQLAlchemyError) -> StorageFailure:
        self.db.rollback()
        _LOG.error("quote storage %s failed: %s", operation, exc)
        return StorageFailure(operation, exc)

    def next_free_id(self) -> int:
        """Return the smallest positive integer not used as a quote id.

        Scans the id set on every call, so inserts cost O(n). Ids stay dense
        after deletions instead of growing forever.
        """
        if self.db.scalar(select(Quote.id).where(Quote.id == 1)) is None:
            return 1
        successor = aliased(Quote)
        first_gap = select(func.min(Quote.id + 1)).where(
            ~select(successor.id).where(successor.id == Quote.id + 1).exists()
        )
        return int(self.db.scalar(first_gap))

    def create(self, author: str, text: str) -> Quote:
        if not author or not text:
            raise InvalidInput()
        try:
            new_id = self.next_free_id()
        except SQLAlchemyError as exc:
            raise self._fail("next_free_id", exc) from exc

        row = Quote(id=new_id, author=author, text=text)
        try:
            self.db.add(row)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            _LOG.error("quote id conflict: %s is already taken", new_id)
            raise Conflict(new_id, exc) from exc
        except SQLAlchemyError as exc:
            raise self._fail("create", exc) from exc

        try:
            self.db.refresh(row)
        except SQLAlchemyError as exc:
            raise self._fail("create", exc) from exc
        return row

    def list_all(self) -> list[Quote]:
        try:
            return list(self.db.scalars(select(Quote).order_by(Quote.id.asc())))
        except SQLAlchemyError as exc:
            raise self._fail("list_all", exc) from exc

    def list_by_author(self, author: str) -> list[Quote]:
        if not author:
            raise InvalidInput()
        stmt = select(Quote).where(Quote.author == author).order_by(Quote.id.asc())
        try:
            return list(self.db.scalars(stmt))
        except SQLAlchemyError as exc:
            raise self._fail("list_by_author", exc) from exc

    def get_random(self) -> Quote:
        try:
            row = self.db.scalars(select(Quote).order_by(func.random()).limit(1)).first()
        except SQLAlchemyError as exc:
            raise self._fail("get_random", exc) from exc
        if row is None:
            raise NotFound()
        return row

    def delete(self, quote_id: int) -> None:
        if quote_id <= 0:
            raise InvalidInput()
        try:
            result = self.db.execute(delete(Quote).where(Quote.id == quote_id))
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete", exc) from exc
        if result.rowcount == 0:
            raise NotFound()

    def exists(self, author: str, text: str) -> bool:
        if not author or not text:
            raise InvalidInput()
        stmt = select(exists().where(Quote.author == author, Quote.text == text))
        try:
            return bool(self.db.scalar(stmt))
        except SQLAlchemyError as exc:
            raise self._fail("exists", exc) from exc
