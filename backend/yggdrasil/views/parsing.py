"""Request decoding shared by the protocol handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from yggdrasil.core.errors import IllegalArgument

if TYPE_CHECKING:
    from starlette.requests import Request


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise IllegalArgument("Malformed JSON body.") from None


async def parse_body(request: Request, model: type[BaseModel]) -> Any:
    """Decode the JSON body into model, raising IllegalArgument when it does not fit."""
    body = await _read_json(request)
    if not isinstance(body, dict):
        raise IllegalArgument("Request body must be a JSON object.")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise IllegalArgument(_first_error(e)) from None


async def parse_body_as(request: Request, adapter: TypeAdapter) -> Any:
    body = await _read_json(request)
    try:
        return adapter.validate_python(body)
    except ValidationError as e:
        raise IllegalArgument(_first_error(e)) from None


def parse_query(request: Request, model: type[BaseModel]) -> Any:
    try:
        return model.model_validate(dict(request.query_params))
    except ValidationError as e:
        raise IllegalArgument(_first_error(e)) from None


def _first_error(e: ValidationError) -> str:
    error = e.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else error["msg"]
