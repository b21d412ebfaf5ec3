"""
HTTP client for the petu API.

Every call returns a ``FetchResult`` instead of raising, so the UI layer
decides what to show. Failures are never turned into success: placeholder
events are only attached to a failed ``list_events`` when the client was
built with ``fallback_to_examples=True``, and the result says so.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

import httpx
from pydantic import ValidationError as PydanticValidationError

from petu.client.examples import example_events
from petu.schemas.events import EventCreate, EventCreatedOut, EventOut, JoinOut
from petu.schemas.users import LoginOut, RegisterOut

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResultKind(str, enum.Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    kind: ResultKind
    data: Optional[T] = None
    error: Optional[str] = None
    status_code: Optional[int] = None
    is_fallback: bool = False

    @property
    def ok(self) -> bool:
        return self.kind is not ResultKind.ERROR

    @classmethod
    def success(cls, data: T, status_code: int | None = None) -> "FetchResult[T]":
        return cls(kind=ResultKind.SUCCESS, data=data, status_code=status_code)

    @classmethod
    def empty(cls, data: T, status_code: int | None = None) -> "FetchResult[T]":
        return cls(kind=ResultKind.EMPTY, data=data, status_code=status_code)

    @classmethod
    def failure(cls, error: str, status_code: int | None = None) -> "FetchResult[T]":
        return cls(kind=ResultKind.ERROR, error=error, status_code=status_code)


class PetuClient:
    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        *,
        fallback_to_examples: bool = False,
        http_client: httpx.Client | None = None,
        timeout: float = 10.0,
    ):
        self.fallback_to_examples = fallback_to_examples
        self.token: Optional[str] = None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _call(self, method: str, path: str, parse: Callable[[Any], T], **kwargs) -> FetchResult[T]:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            return FetchResult.failure(str(e) or e.__class__.__name__)

        try:
            body = response.json()
        except ValueError:
            return FetchResult.failure(
                f"Invalid response from server (HTTP {response.status_code})",
                response.status_code,
            )

        if response.status_code >= 400 or (isinstance(body, dict) and body.get("success") is False):
            error = body.get("error") if isinstance(body, dict) else None
            return FetchResult.failure(error or f"HTTP {response.status_code}", response.status_code)

        try:
            return FetchResult.success(parse(body), response.status_code)
        except PydanticValidationError as e:
            return FetchResult.failure(f"Unexpected response shape: {e}", response.status_code)

    # ---------- status ----------
    def status(self) -> FetchResult[dict]:
        return self._call("GET", "/", dict)

    # ---------- events ----------
    def list_events(self) -> FetchResult[list[EventOut]]:
        result = self._call(
            "GET", "/api/events", lambda body: [EventOut.model_validate(item) for item in body]
        )
        if result.kind is ResultKind.ERROR:
            if self.fallback_to_examples:
                return FetchResult(
                    kind=ResultKind.ERROR,
                    data=example_events(),
                    error=result.error,
                    status_code=result.status_code,
                    is_fallback=True,
                )
            return result
        if not result.data:
            return FetchResult.empty([], result.status_code)
        return result

    def create_event(self, payload: EventCreate) -> FetchResult[EventOut]:
        return self._call(
            "POST",
            "/api/events/create",
            lambda body: EventCreatedOut.model_validate(body).event,
            json=payload.model_dump(by_alias=True),
        )

    def join_event(self, event_id: int | str) -> FetchResult[JoinOut]:
        return self._call("POST", f"/api/events/{event_id}/join", JoinOut.model_validate)

    # ---------- auth ----------
    def login(self, email: str, password: str) -> FetchResult[LoginOut]:
        result = self._call(
            "POST", "/api/login", LoginOut.model_validate, json={"email": email, "password": password}
        )
        if result.kind is ResultKind.SUCCESS:
            self.token = result.data.token
        return result

    def register(self, email: str, password: str, full_name: str) -> FetchResult[RegisterOut]:
        return self._call(
            "POST",
            "/api/register",
            RegisterOut.model_validate,
            json={"email": email, "password": password, "full_name": full_name},
        )
