"""Decoding of raw stored documents into EmailRequest values."""

from typing import Optional, Union

from pydantic import ValidationError

from relay.domain.models import EmailRequest

from .models import DecodeError


def decode_email_request(raw: Optional[Union[bytes, str]]) -> EmailRequest:
    """Decode the raw body of a stored document into an EmailRequest.

    Decoding is all-or-nothing: every required field must be present and a
    string, otherwise nothing is returned.

    Args:
        raw: JSON document body as written to the store

    Returns:
        The decoded EmailRequest

    Raises:
        DecodeError: If the body is missing, not JSON, or does not match the shape
    """
    if raw is None:
        raise DecodeError("document has no data")

    try:
        return EmailRequest.model_validate_json(raw)
    except ValidationError as e:
        raise DecodeError(_describe_validation_error(e)) from e


def _describe_validation_error(error: ValidationError) -> str:
    """Render pydantic errors as one readable line, e.g. ``missing field `to```."""
    parts = []
    for item in error.errors():
        field_path = ".".join(str(loc) for loc in item["loc"])
        error_type = item["type"]

        if error_type == "missing":
            parts.append(f"missing field `{field_path}`")
        elif error_type == "json_invalid":
            parts.append(f"invalid JSON ({item['msg']})")
        elif error_type == "string_type":
            parts.append(f"invalid type for `{field_path}`: expected a string")
        elif field_path:
            parts.append(f"`{field_path}`: {item['msg']}")
        else:
            parts.append(item["msg"])

    return "; ".join(parts) or str(error)
