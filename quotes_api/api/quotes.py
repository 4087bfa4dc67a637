import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from quotes_api.db.session import get_db
from quotes_api.domain.errors import InvalidInput, NotFound, QuoteError
from quotes_api.repositories.quotes import QuoteStorage
from quotes_api.schemas.quote import (
    ErrorEnvelope,
    MessageEnvelope,
    QuoteCreate,
    QuoteEnvelope,
    QuoteListEnvelope,
    QuoteRead,
)
from quotes_api.services.quotes import QuoteService

router = APIRouter()
_LOG = logging.getLogger("quotes_api.api")

# ids are stored as BIGINT on PostgreSQL
MAX_QUOTE_ID = 2**63 - 1

ERROR_RESPONSES = {
    400: {"model": ErrorEnvelope},
    404: {"model": ErrorEnvelope},
    500: {"model": ErrorEnvelope},
}


def get_quote_service(db: Session = Depends(get_db)) -> QuoteService:
    return QuoteService(QuoteStorage(db))


@router.post("", status_code=201, response_model=QuoteEnvelope, responses=ERROR_RESPONSES)
@router.post("/", status_code=201, response_model=QuoteEnvelope, include_in_schema=False)
def create_quote(payload: QuoteCreate, service: QuoteService = Depends(get_quote_service)):
    try:
        already_stored = service.exists(payload.author, payload.quote)
    except InvalidInput as exc:
        _LOG.error("invalid input for duplicate check: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except QuoteError as exc:
        _LOG.error("duplicate check failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    if already_stored:
        _LOG.info("quote by %r already exists", payload.author)
        raise HTTPException(status_code=400, detail="Quote already exists")

    try:
        row = service.create(payload.author, payload.quote)
    except InvalidInput as exc:
        _LOG.error("invalid input for quote create: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except QuoteError as exc:
        _LOG.error("quote create failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"data": QuoteRead.from_model(row)}


@router.get("", response_model=QuoteListEnvelope, responses=ERROR_RESPONSES)
@router.get("/", response_model=QuoteListEnvelope, include_in_schema=False)
def list_quotes(author: str | None = Query(None), service: QuoteService = Depends(get_quote_service)):
    # ?author= with an empty value lists everything
    if not author:
        try:
            rows = service.list_all()
        except QuoteError as exc:
            _LOG.error("quote listing failed: %s", exc)
            raise HTTPException(status_code=500, detail=str(exc))
        return {"data": [QuoteRead.from_model(r) for r in rows]}

    try:
        rows = service.list_by_author(author)
    except InvalidInput as exc:
        _LOG.error("invalid author filter %r: %s", author, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except QuoteError as exc:
        _LOG.error("quote listing by author failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    if not rows:
        raise HTTPException(status_code=404, detail="No quotes found for the specified author")
    return {"data": [QuoteRead.from_model(r) for r in rows]}


@router.get("/random", response_model=QuoteEnvelope, responses=ERROR_RESPONSES)
def random_quote(service: QuoteService = Depends(get_quote_service)):
    try:
        row = service.get_random()
    except NotFound:
        _LOG.error("random quote requested from an empty store")
        raise HTTPException(status_code=404, detail="No quotes found")
    except QuoteError as exc:
        _LOG.error("random quote failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"data": QuoteRead.from_model(row)}


@router.delete("/{id}", response_model=MessageEnvelope, responses=ERROR_RESPONSES)
def delete_quote(id: int = Path(..., le=MAX_QUOTE_ID), service: QuoteService = Depends(get_quote_service)):
    try:
        service.delete_by_id(id)
    except InvalidInput as exc:
        _LOG.error("invalid quote id %s: %s", id, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except NotFound:
        _LOG.error("quote %s not found", id)
        raise HTTPException(status_code=404, detail="Quote not found")
    except QuoteError as exc:
        _LOG.error("quote %s delete failed: %s", id, exc)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"message": f"Quote with ID {id} deleted successfully"}
