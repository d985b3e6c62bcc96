"""Upload Boundary — turns an incoming request into (raw fields, optional ImageUpload).

Invariants:
    - The image may arrive under either name in IMAGE_FIELD_ALIASES; it is resolved here once
    - At most one file per request; a second file is an UploadError
    - Files under any other field name are ignored
    - A declared size over the ceiling is rejected before the file body is read
    - skills arrive as repeated `skills` / `skills[]` fields or one comma-separated value

Design Decisions:
    - The upload is returned as a value and passed to the service explicitly,
      never attached to the request object
"""

from typing import Any

from fastapi import Request
from starlette.datastructures import FormData, UploadFile

from portfolio_api.core.errors import FieldValidationError, UploadError
from portfolio_api.services.image_lifecycle import ImageLifecycleManager, ImageUpload

IMAGE_FIELD = "image"
IMAGE_FIELD_ALIASES = {"image": IMAGE_FIELD, "uploadedFile": IMAGE_FIELD}
LIST_FIELDS = {"skills"}

_FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def is_form(request: Request) -> bool:
    return request.headers.get("content-type", "").startswith(_FORM_TYPES)


def form_fields(form: FormData) -> dict[str, Any]:
    """Plain text fields of a form; list fields collect every occurrence."""
    fields: dict[str, Any] = {}
    collected: dict[str, list[str]] = {}
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            continue
        name = key[:-2] if key.endswith("[]") else key
        if name in LIST_FIELDS:
            collected.setdefault(name, []).append(value)
        else:
            fields[name] = value
    for name, values in collected.items():
        # A single value may itself be a comma-separated list; the schema splits it
        fields[name] = values[0] if len(values) == 1 else values
    return fields


async def image_from_form(
    form: FormData, images: ImageLifecycleManager | None = None,
) -> ImageUpload | None:
    """The single image in the form, or None.

    With a manager, type and declared size are checked before the body is read,
    so an oversized file is rejected without buffering it.
    """
    files = [
        (key, value) for key, value in form.multi_items() if isinstance(value, UploadFile)
    ]
    if len(files) > 1:
        raise UploadError("Too many files. Only one image is allowed")
    for key, file in files:
        if IMAGE_FIELD_ALIASES.get(key) != IMAGE_FIELD:
            continue
        if not file.filename and not file.size:
            return None
        mime_type = file.content_type or "application/octet-stream"
        if images is not None and file.size is not None:
            images.check(mime_type, file.size)
        payload = await file.read()
        return ImageUpload(
            payload=payload,
            mime_type=mime_type,
            filename=file.filename or "",
        )
    return None


async def read_payload(
    request: Request, images: ImageLifecycleManager | None = None,
) -> tuple[dict[str, Any], ImageUpload | None]:
    """Read a JSON or form body into raw fields plus the optional image."""
    if is_form(request):
        form = await request.form()
        return form_fields(form), await image_from_form(form, images)

    raw = await request.body()
    if not raw.strip():
        return {}, None
    try:
        body = await request.json()
    except ValueError:
        raise FieldValidationError({"body": "Request body must be valid JSON"})
    if not isinstance(body, dict):
        raise FieldValidationError({"body": "Request body must be a JSON object"})
    return body, None
