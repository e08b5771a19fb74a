from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE")

HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]

ERROR_PLACEHOLDER_BODY = "Error parsing request"


class BodyKind(str, Enum):
    ABSENT = "absent"
    JSON = "json"
    RAW = "raw"
    ERROR = "error"


class EchoBody(BaseModel):
    """Echoed request body: absent, decoded JSON, raw text, or the error placeholder."""

    model_config = ConfigDict(frozen=True)

    kind: BodyKind
    value: Any = None

    @classmethod
    def absent(cls) -> EchoBody:
        return cls(kind=BodyKind.ABSENT)

    @classmethod
    def structured(cls, value: Any) -> EchoBody:
        return cls(kind=BodyKind.JSON, value=value)

    @classmethod
    def raw(cls, text: str) -> EchoBody:
        return cls(kind=BodyKind.RAW, value=text)

    @classmethod
    def error_placeholder(cls) -> EchoBody:
        return cls(kind=BodyKind.ERROR, value=ERROR_PLACEHOLDER_BODY)

    @property
    def is_present(self) -> bool:
        # A JSON ``null`` body is omitted like an absent one.
        return self.kind is not BodyKind.ABSENT and self.value is not None


class EchoResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: HttpMethod
    headers: dict[str, str] = Field(default_factory=dict)
    body: EchoBody = Field(default_factory=EchoBody.absent)
    timestamp: datetime
    request_uri: str | None = None
    query_string: str | None = None
    remote_addr: str | None = None
    user_agent: str | None = None
    content_type: str | None = None
    error: str | None = None

    def to_payload(self, timestamp_format: str = "%Y-%m-%d %H:%M:%S") -> dict[str, Any]:
        """Render the wire shape: camelCase keys, unset optionals omitted."""

        payload: dict[str, Any] = {"method": self.method, "headers": dict(self.headers)}
        if self.body.is_present:
            payload["body"] = self.body.value
        payload["timestamp"] = self.timestamp.strftime(timestamp_format)

        optional = {
            "requestUri": self.request_uri,
            "queryString": self.query_string,
            "remoteAddr": self.remote_addr,
            "userAgent": self.user_agent,
            "contentType": self.content_type,
            "error": self.error,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload


class HealthResponse(BaseModel):
    status: str = "UP"
    timestamp: datetime
    service: str
    version: str


class InfoResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    application: str
    version: str
    description: str
    build_time: datetime = Field(alias="build-time")
    endpoints: dict[str, str]


class MetricsSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_api_calls: float
    total_errors: float
    active_connections: int
    total_requests: int
    calls_by_method: dict[str, float]
    uptime_seconds: float
    timestamp: datetime
