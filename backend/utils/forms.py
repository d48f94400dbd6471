"""Read admin write payloads sent either as JSON or as multipart forms."""
import json
from typing import Any, Dict, List, Tuple

from fastapi import Request
from starlette.datastructures import UploadFile

from utils.errors import ValidationError

Files = Dict[str, List[UploadFile]]


def _decode_form_value(value: str) -> Any:
    # The admin panel serializes nested objects and arrays as JSON strings
    text = value.strip()
    if text[:1] in ("[", "{"):
        try:
            return json.loads(text)
        except ValueError:
            return value
    return value


async def read_payload(request: Request) -> Tuple[Dict[str, Any], Files]:
    """Return (fields, files). JSON bodies never carry files."""
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data") or content_type.startswith("application/x-www-form-urlencoded"):
        form = await request.form()
        data: Dict[str, Any] = {}
        files: Files = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if value.filename:
                    files.setdefault(key, []).append(value)
                continue
            data[key] = _decode_form_value(value)
        return data, files

    body = await request.body()
    if not body:
        return {}, {}
    try:
        data = json.loads(body)
    except ValueError:
        raise ValidationError("Malformed JSON body")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data, {}


def single_file(files: Files, field: str, required: bool = False):
    uploads = files.get(field) or []
    if len(uploads) > 1:
        raise ValidationError(
            f"Only one file allowed for {field}",
            errors=[{"field": field, "message": "Only one file allowed"}],
        )
    if required and not uploads:
        raise ValidationError(
            f"{field.capitalize()} file is required",
            errors=[{"field": field, "message": "File is required"}],
        )
    return uploads[0] if uploads else None
