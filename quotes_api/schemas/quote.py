from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class QuoteCreate(BaseModel):
    # Missing fields decode as empty strings and are rejected by QuoteService
    author: str = ""
    quote: str = ""


class QuoteRead(BaseModel):
    id: int
    author: str
    quote: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, row) -> "QuoteRead":
        return cls(id=row.id, author=row.author, quote=row.text, created_at=row.created_at)


class QuoteEnvelope(BaseModel):
    data: QuoteRead


class QuoteListEnvelope(BaseModel):
    data: List[QuoteRead]


class MessageEnvelope(BaseModel):
    message: str


class ErrorEnvelope(BaseModel):
    error: str
