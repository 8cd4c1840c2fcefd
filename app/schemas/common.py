"""Shared schema bases: camelCase on the wire, snake_case in Python."""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes field names as camelCase; accepts either form on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(CamelModel):
    """Request body base: string fields must be encodable as UTF-8 (no lone surrogates)."""

    @field_validator("*")
    @classmethod
    def require_utf8_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                v.encode("utf-8")
            except UnicodeEncodeError as e:
                raise ValueError("must be valid UTF-8 text") from e
        return v
