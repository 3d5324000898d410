"""JOSE header model."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .codec import b64url_encode, dumps, loads_object
from .constants import DEFAULT_ALGORITHM, TOKEN_TYPE_JWT
from .errors import DecodeError, ValidationError


class Header(BaseModel):
    """The first token segment: token type, algorithm and optional hints.

    Unregistered header parameters found while parsing are kept as extra
    fields and written back out unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True, extra="allow")

    type: Optional[str] = Field(default=None, alias="typ")
    algorithm: Optional[str] = Field(default=None, alias="alg")
    encryption: Optional[str] = Field(default=None, alias="enc")
    compression: Optional[str] = Field(default=None, alias="zip")
    key_id: Optional[str] = Field(default=None, alias="kid")

    @classmethod
    def default(cls) -> Header:
        return cls(type=TOKEN_TYPE_JWT, algorithm=DEFAULT_ALGORITHM)

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_none=True)
        return {name: value for name, value in data.items() if value != ""}

    def serialize(self) -> bytes:
        return dumps(self.to_dict())

    def encode_segment(self) -> str:
        return b64url_encode(self.serialize())

    def validate_header(self) -> None:
        if not self.algorithm:
            raise ValidationError("missing required field: algorithm", details={"field": "alg"})

    @classmethod
    def parse(cls, data: bytes) -> Header:
        raw = loads_object(data, segment="header")
        try:
            header = cls.model_validate(raw)
        except PydanticValidationError as exc:
            fields = sorted({str(error["loc"][0]) for error in exc.errors() if error["loc"]})
            raise DecodeError(
                "Invalid header: unexpected value types",
                details={"fields": ", ".join(fields)},
            ) from exc
        header.validate_header()
        return header


__all__ = ["Header"]
