"""
Canonical record schema
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from logshield.utils.time_utils import check_local_range, ensure_aware, now, parse_timestamp


class AttackType(str, Enum):
    """Known attack signatures"""
    NONE = "None"
    SQLI = "SQLi"
    XSS = "XSS"
    RCE = "RCE"
    DDOS = "DDoS"


class ImpactLevel(str, Enum):
    """Outcome of a record"""
    SAFE = "Safe"
    ATTEMPT = "Attempt"      # signature found, request was rejected
    BREACH = "Breach"        # signature found, request succeeded (2xx)


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class RecordDetails(BaseModel):
    """Request details attached to a record"""
    model_config = _CAMEL

    headers: Dict[str, str] = Field(default_factory=dict)
    payload: Optional[str] = None
    user_agent: str = "Unknown"


class Record(BaseModel):
    """
    Normalized security event. Every adapter produces this shape and
    `model_dump(mode="json", by_alias=True)` gives back the structured input form.
    """
    model_config = _CAMEL

    id: str = Field(default_factory=lambda: f"rec-{uuid.uuid4().hex[:12]}")
    timestamp: datetime = Field(default_factory=now)
    source_ip: str = "0.0.0.0"
    method: HttpMethod = HttpMethod.GET
    url: str = "/"
    status_code: int = 200
    attack_type: AttackType = AttackType.NONE
    impact: ImpactLevel = ImpactLevel.SAFE
    details: RecordDetails = Field(default_factory=RecordDetails)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Any:
        if value is None:
            return now()
        if isinstance(value, str):
            parsed = parse_timestamp(value)
            if parsed is None:
                raise ValueError(f"unparseable timestamp: {value!r}")
            return parsed
        return value

    @field_validator("timestamp")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        value = ensure_aware(value)
        try:
            return check_local_range(value)
        except OverflowError:
            raise ValueError(f"timestamp out of range: {value.isoformat()}")

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    @property
    def is_attack(self) -> bool:
        return self.attack_type != AttackType.NONE

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
