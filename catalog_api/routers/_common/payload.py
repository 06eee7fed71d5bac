"""
Request payload extraction for product writes.

Writes accept either a JSON object or a multipart form. For forms, plain
fields become the payload and every file part, whatever its field name,
becomes an upload in the order it was sent.
"""

from typing import Any

from fastapi import Request
from starlette.datastructures import UploadFile

from catalog_shared.utils.exceptions import ValidationError


async def read_payload(request: Request) -> tuple[dict[str, Any], list[UploadFile]]:
    """
    Split the request body into (payload, files).

    Usage:
        payload, files = await read_payload(request)
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as exc:
            raise ValidationError("Malformed JSON body") from exc
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return body, []

    form = await request.form()
    payload: dict[str, Any] = {}
    files: list[UploadFile] = []
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            # Browsers send an empty part for an untouched file input
            if value.filename:
                files.append(value)
        else:
            payload[key] = value
    return payload, files
