from __future__ import annotations

from typing import Protocol

from quotes_api.domain.errors import InvalidInput
from quotes_api.models.quote import Quote


class QuoteStore(Protocol):
    def create(self, author: str, text: str) -> Quote:
        ...

    def list_all(self) -> list[Quote]:
        ...

    def list_by_author(self, author: str) -> list[Quote]:
        ...

    def get_random(self) -> Quote:
        ...

    def delete(self, quote_id: int) -> None:
        ...

    def exists(self, author: str, text: str) -> bool:
        ...


class QuoteService:
    """Input validation in front of a :class:`QuoteStore`.

    Invalid arguments raise :class:`InvalidInput` before the store is touched.
    Store errors (``NotFound``, ``StorageFailure``) propagate unchanged.
    """

    def __init__(self, store: QuoteStore):
        self.store = store

    def create(self, author: str, text: str) -> Quote:
        if not author or not text:
            raise InvalidInput()
        return self.store.create(author, text)

    def list_all(self) -> list[Quote]:
        return self.store.list_all()

    def list_by_author(self, author: str) -> list[Quote]:
        if not author:
            raise InvalidInput()
        return self.store.list_by_author(author)

    def get_random(self) -> Quote:
        return self.store.get_random()

    def delete_by_id(self, quote_id: int) -> None:
        if quote_id <= 0:
            raise InvalidInput()
        self.store.delete(quote_id)

    def exists(self, author: str, text: str) -> bool:
        if not author or not text:
            raise InvalidInput()
        return self.store.exists(author, text)
