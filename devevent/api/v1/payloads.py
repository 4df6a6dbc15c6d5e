"""
Decoding of event write payloads.

Event create/update accept JSON bodies or forms (multipart or urlencoded).
In forms a binary ``image`` part is returned separately so the service can
upload it before the record is written.
"""
from typing import Optional, Tuple
from fastapi import Request
from pydantic import ValidationError
from starlette.datastructures import UploadFile
from devevent.core.errors import InvalidPayloadError, UnsupportedMediaTypeError
from devevent.schemas import EventIn

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def read_event_payload(request: Request) -> Tuple[EventIn, Optional[UploadFile]]:
    """
    Read an event payload from the request body.

    Returns:
        Tuple of (parsed fields, uploaded image or None)

    Raises:
        UnsupportedMediaTypeError: For any other content type
        InvalidPayloadError: If the body cannot be decoded into event fields
    """
    content_type = (request.headers.get("content-type") or "").lower()
    image: Optional[UploadFile] = None

    if "application/json" in content_type:
        try:
            raw = await request.json()
        except ValueError as e:
            raise InvalidPayloadError("Request body is not valid JSON", detail=str(e))
        if not isinstance(raw, dict):
            raise InvalidPayloadError("Request body must be a JSON object")
    elif any(form_type in content_type for form_type in FORM_CONTENT_TYPES):
        form = await request.form()
        raw = {}
        for key, value in form.items():
            if isinstance(value, UploadFile):
                # browsers send an empty part when no file was picked
                if key == "image" and value.filename:
                    image = value
                continue
            raw[key] = value
    else:
        raise UnsupportedMediaTypeError(content_type)

    try:
        return EventIn.model_validate(raw), image
    except ValidationError as e:
        raise InvalidPayloadError("Invalid event payload", detail=str(e))
