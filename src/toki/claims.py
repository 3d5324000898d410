"""Claims model: registered JWT claims plus application payload."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Annotated, Any, Mapping, Optional, Union

from pydantic import AllowInfNan, BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator
from pydantic import ValidationError as PydanticValidationError

from .codec import b64url_encode, dumps, loads_object
from .constants import REGISTERED_CLAIMS
from .errors import DecodeError, ExpiredTokenError, NotYetActiveError, ValidationError

# JSON numbers only: no numeric strings, no NaN or infinities.
NumericDate = Union[StrictInt, Annotated[StrictFloat, AllowInfNan(False)]]
Instant = Union[int, float, datetime]


def utc_timestamp() -> int:
    return int(datetime.now(timezone.utc).timestamp())


def _to_timestamp(value: Instant | None) -> NumericDate:
    if value is None:
        return utc_timestamp()
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())
    return value


def _format_instant(value: NumericDate) -> str:
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()
    except (OverflowError, ValueError, OSError):
        return str(value)


class Claims(BaseModel):
    """The second token segment.

    Registered claims are typed attributes; everything else lives in
    ``payload``. Serialization flattens both into one JSON object, so a
    payload key may not reuse a registered claim name.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True, extra="forbid")

    issuer: Optional[str] = Field(default=None, alias="iss")
    subject: Optional[str] = Field(default=None, alias="sub")
    audience: Optional[Union[str, list[str]]] = Field(default=None, alias="aud")
    expires_at: Optional[NumericDate] = Field(default=None, alias="exp")
    not_before: Optional[NumericDate] = Field(default=None, alias="nbf")
    issued_at: Optional[NumericDate] = Field(default_factory=utc_timestamp, alias="iat")
    token_id: Optional[str] = Field(default=None, alias="jti")
    payload: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @field_validator("expires_at", "not_before", "issued_at", mode="before")
    @classmethod
    def _coerce_datetime(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return _to_timestamp(value)
        if isinstance(value, bool):
            raise ValueError("NumericDate must be a number")
        return value

    # Mapping-style access -------------------------------------------------
    def _field_for(self, key: str) -> str | None:
        if key not in REGISTERED_CLAIMS:
            return None
        for name, info in type(self).model_fields.items():
            if info.alias == key:
                return name
        return None  # pragma: no cover - every registered claim has a field

    def __getitem__(self, key: str) -> Any:
        field_name = self._field_for(key)
        if field_name is not None:
            value = getattr(self, field_name)
            if value is None:
                raise KeyError(key)
            return value
        return self.payload[key]

    def __setitem__(self, key: str, value: Any) -> None:
        field_name = self._field_for(key)
        if field_name is not None:
            setattr(self, field_name, value)
        else:
            self.payload[key] = value

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        field_name = self._field_for(key)
        if field_name is not None:
            return getattr(self, field_name) is not None
        return key in self.payload

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default

    # Relative time helpers ------------------------------------------------
    def expires_in(self, delta: timedelta | int) -> None:
        self.expires_at = utc_timestamp() + _seconds(delta)

    def not_before_in(self, delta: timedelta | int) -> None:
        self.not_before = utc_timestamp() + _seconds(delta)

    # Serialization --------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        registered = self.model_dump(by_alias=True, exclude_none=True)
        collisions = sorted(set(self.payload) & set(REGISTERED_CLAIMS))
        if collisions:
            raise ValidationError(
                "payload keys collide with registered claims",
                details={"keys": ", ".join(collisions)},
            )
        return {**registered, **self.payload}

    def serialize(self) -> bytes:
        return dumps(self.to_dict())

    def encode_segment(self) -> str:
        return b64url_encode(self.serialize())

    # Temporal validation --------------------------------------------------
    def is_expired(self, now: Instant | None = None, *, leeway: int = 0) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at < _to_timestamp(now) - leeway

    def is_active(self, now: Instant | None = None, *, leeway: int = 0) -> bool:
        if self.not_before is None:
            return True
        return self.not_before <= _to_timestamp(now) + leeway

    def validate_temporal(self, now: Instant | None = None, *, leeway: int = 0) -> None:
        current = _to_timestamp(now)
        if self.is_expired(current, leeway=leeway):
            raise ExpiredTokenError(
                "Token has expired",
                details={"exp": _format_instant(self.expires_at)},
            )
        if not self.is_active(current, leeway=leeway):
            raise NotYetActiveError(
                f"Token not usable before {_format_instant(self.not_before)}",
                details={"nbf": _format_instant(self.not_before)},
            )

    @classmethod
    def _build(cls, values: dict[str, Any], error: type[ValidationError] | type[DecodeError]) -> Claims:
        try:
            return cls.model_validate(values)
        except PydanticValidationError as exc:
            fields = sorted({str(item["loc"][0]) for item in exc.errors() if item["loc"]})
            raise error(
                "Invalid claims: unexpected value types",
                details={"fields": ", ".join(fields)},
            ) from exc

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Claims:
        """Split a flat claims mapping into registered fields and payload.

        ``iat`` defaults to now when absent. No temporal checks run.
        """
        registered = {key: value for key, value in data.items() if key in REGISTERED_CLAIMS}
        payload = {key: value for key, value in data.items() if key not in REGISTERED_CLAIMS}
        return cls._build({**registered, "payload": payload}, ValidationError)

    @classmethod
    def parse(cls, data: bytes, *, now: Instant | None = None, leeway: int = 0) -> Claims:
        """Decode an incoming claims segment and check ``exp``/``nbf``."""
        raw = loads_object(data, segment="claims")
        # Absent registered claims stay unset, including iat.
        registered = {key: raw.get(key) for key in REGISTERED_CLAIMS}
        payload = {key: value for key, value in raw.items() if key not in REGISTERED_CLAIMS}
        claims = cls._build({**registered, "payload": payload}, DecodeError)
        claims.validate_temporal(now, leeway=leeway)
        return claims


def _seconds(delta: timedelta | int) -> int:
    if isinstance(delta, timedelta):
        return int(delta.total_seconds())
    return int(delta)


__all__ = ["Claims", "utc_timestamp"]
