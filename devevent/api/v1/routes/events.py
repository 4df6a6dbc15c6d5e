from fastapi import APIRouter, Depends, Query, Request, status
from devevent.api.v1.payloads import read_event_payload
from devevent.schemas import EventList, EventSearchResults, EventDetail, EventWriteResult, MessageOut
from devevent.db.query_builder import SearchParams
from devevent.db.session import get_session
from devevent.services.event_service import EventService
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

router = APIRouter(prefix="/events", tags=["events"])


def get_event_service(session: AsyncSession = Depends(get_session)) -> EventService:
    return EventService(session)


@router.get("", response_model=EventList)
async def list_events(event_service: EventService = Depends(get_event_service)):
    """Up to 100 most recently published events."""
    return {"events": await event_service.list_events()}


@router.post("", response_model=EventWriteResult, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    request: Request,
    event_service: EventService = Depends(get_event_service)
):
    """
    Publish an event from a JSON body or a form.

    Form bodies may carry the image as a file part, which is uploaded before
    the event is stored. ``agenda`` may be newline-separated and ``tags``
    comma-separated; both also accept a JSON array string.
    """
    payload, image = await read_event_payload(request)
    ev = await event_service.create_event(payload, image)
    return {"message": "Event created successfully", "event": ev}


@router.get("/search", response_model=EventSearchResults)
async def search_events(
    q: Optional[str] = Query(None, description="Text in title, description, overview or organizer"),
    location: Optional[str] = Query(None, description="Text in location"),
    mode: Optional[str] = Query(None, description="Exact mode, e.g. online"),
    tag: Optional[str] = Query(None, description="Text in any tag"),
    date_from: Optional[str] = Query(None, alias="dateFrom", description="Earliest date, YYYY-MM-DD"),
    date_to: Optional[str] = Query(None, alias="dateTo", description="Latest date, YYYY-MM-DD"),
    limit: Optional[str] = Query(None, description="Page size (default 50, max 100)"),
    page: Optional[str] = Query(None, description="Page number, 1-indexed"),
    event_service: EventService = Depends(get_event_service)
):
    """
    Search events. Results are ordered by date, then newest published first.
    """
    params = SearchParams(
        q=q,
        location=location,
        mode=mode,
        tag=tag,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
        page=page,
    )
    return await event_service.search_events(params)


@router.get("/{slug}", response_model=EventDetail)
async def get_event_detail(
    slug: str,
    event_service: EventService = Depends(get_event_service)
):
    return {"event": await event_service.get_event(slug)}


@router.put("/{slug}", response_model=EventWriteResult)
async def update_event_endpoint(
    slug: str,
    request: Request,
    event_service: EventService = Depends(get_event_service)
):
    """Update the submitted fields of an event; a new title re-derives the slug."""
    payload, image = await read_event_payload(request)
    ev = await event_service.update_event(slug, payload, image)
    return {"message": "Event updated successfully", "event": ev}


@router.delete("/{slug}", response_model=MessageOut)
async def delete_event_endpoint(
    slug: str,
    event_service: EventService = Depends(get_event_service)
):
    await event_service.delete_event(slug)
    return {"message": "Event deleted successfully"}
