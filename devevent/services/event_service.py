from datetime import datetime, timezone
from typing import List, Optional
from starlette.datastructures import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool
from devevent.cache.cache_decorators import invalidate_views
from devevent.core import storage
from devevent.core.errors import EventNotFoundError, MissingImageError
from devevent.core.logging import logger
from devevent.db.models import Event
from devevent.db.query_builder import SearchParams, build_search_filter
from devevent.db.repositories import (
    create_event as db_create_event,
    update_event as db_update_event,
    delete_event as db_delete_event,
    get_event_by_slug as db_get_event_by_slug,
    list_recent_events as db_list_recent_events,
    search_events as db_search_events,
    get_category_counts as db_get_category_counts,
    get_overview_stats as db_get_overview_stats,
    event_to_record,
)
from devevent.domain.validators import prepare_event
from devevent.schemas import EventIn


class EventService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _upload_image(self, image: UploadFile) -> str:
        # Awaited before the record is written; a later write failure leaves the upload orphaned.
        data = await image.read()
        if not data:
            raise MissingImageError()
        content_type = image.content_type or "application/octet-stream"
        object_name = storage.build_object_name(image.filename or "", content_type)
        return await run_in_threadpool(storage.upload_image, data, object_name, content_type)

    async def _get_or_404(self, slug: str) -> Event:
        ev = await db_get_event_by_slug(self.session, slug)
        if not ev:
            raise EventNotFoundError(slug)
        return ev

    async def list_events(self) -> List[Event]:
        return await db_list_recent_events(self.session)

    async def search_events(self, params: SearchParams) -> dict:
        plan = build_search_filter(params)
        total, events = await db_search_events(self.session, plan)
        return {"events": events, "pagination": plan.pagination.summary(total)}

    async def get_event(self, slug: str) -> Event:
        return await self._get_or_404(slug)

    async def create_event(self, payload: EventIn, image: Optional[UploadFile] = None) -> Event:
        fields = payload.model_dump(exclude_unset=True)
        if image is not None:
            fields["image"] = await self._upload_image(image)
        elif not (fields.get("image") or "").strip():
            raise MissingImageError()

        record = prepare_event(fields, is_new=True)
        ev = await db_create_event(self.session, record)
        await invalidate_views()
        logger.info(f"Event published: {ev.slug}")
        return ev

    async def update_event(self, slug: str, payload: EventIn, image: Optional[UploadFile] = None) -> Event:
        ev = await self._get_or_404(slug)
        changes = payload.model_dump(exclude_unset=True)
        if image is not None:
            changes["image"] = await self._upload_image(image)

        record = prepare_event({**event_to_record(ev), **changes}, is_new=False, changed_fields=changes.keys())
        ev = await db_update_event(self.session, ev, record)
        await invalidate_views()
        logger.info(f"Event updated: {slug} -> {ev.slug}")
        return ev

    async def delete_event(self, slug: str) -> None:
        ev = await self._get_or_404(slug)
        await db_delete_event(self.session, ev)
        await invalidate_views()
        logger.info(f"Event deleted: {slug}")

    async def get_categories(self) -> dict:
        return await db_get_category_counts(self.session)

    async def get_stats(self) -> dict:
        today = datetime.now(timezone.utc).date().isoformat()
        return await db_get_overview_stats(self.session, today)
