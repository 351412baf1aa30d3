"""
Visualize request body parsing.

The endpoint accepts multipart uploads, urlencoded forms and JSON bodies;
this reduces all three to the raw input and options.

Dependencies: fastapi, starlette, pydantic
System role: Request body adapter for the visualize endpoint
"""

import json
from typing import Any

from fastapi import Request
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from visual_notes.core.exceptions import InvalidInputError
from visual_notes.core.input_normalizer import RawVisualizeInput
from visual_notes.models.visualize import VisualizeRequest

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def _read_form(request: Request) -> tuple[dict[str, Any], RawVisualizeInput]:
    form = await request.form()
    fields = {key: value for key, value in form.items() if isinstance(value, str)}

    upload = form.get("file")
    if isinstance(upload, UploadFile):
        data = await upload.read()
        return fields, RawVisualizeInput(
            text=fields.get("text"),
            file_bytes=data,
            mime_type=upload.content_type,
            filename=upload.filename,
        )
    return fields, RawVisualizeInput(text=fields.get("text"))


async def _read_json(request: Request) -> tuple[dict[str, Any], RawVisualizeInput]:
    body = await request.body()
    if not body.strip():
        return {}, RawVisualizeInput()
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        raise InvalidInputError("Invalid request body") from e
    if not isinstance(payload, dict):
        raise InvalidInputError("Invalid request body")

    text = payload.get("text")
    return payload, RawVisualizeInput(text=text if isinstance(text, str) else None)


async def parse_visualize_request(request: Request) -> tuple[VisualizeRequest, RawVisualizeInput]:
    """
    Parse a visualize request body of any supported content type.

    Returns:
        tuple: (options, raw content for the normalizer)

    Raises:
        InvalidInputError: Unparseable body
    """
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        fields, raw = await _read_form(request)
    else:
        fields, raw = await _read_json(request)

    try:
        options = VisualizeRequest.model_validate(
            {
                "text": raw.text,
                "theme": fields.get("theme", "light"),
                "expandContent": fields.get("expandContent", False),
            }
        )
    except ValidationError as e:
        raise InvalidInputError("Invalid request body") from e
    return options, raw
