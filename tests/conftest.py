from typing import Any

import pytest

from delphixci.engine.engine import DelphixEngine
from delphixci.http import HttpWrapper
from delphixci.http import JsonResponse
from delphixci.json_types import JSONDict
from delphixci.json_types import JSONValue


class MockHttpWrapper(HttpWrapper):
    def __init__(self) -> None:
        self.post_requests: list[tuple[str, dict[str, Any], JSONDict]] = []
        self.get_requests: list[tuple[str, dict[str, Any]]] = []
        # first in, first out; an exception in here is raised instead of answering
        self.responses: list[JsonResponse | Exception] = []

    def _next(self) -> JsonResponse:
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def post(self, url: str, headers: dict[str, Any], data: JSONDict) -> JsonResponse:
        self.post_requests.append((url, headers, data))
        return self._next()

    def get(self, url: str, headers: dict[str, Any]) -> JsonResponse:
        self.get_requests.append((url, headers))
        return self._next()

    def add_ok(
        self,
        result: JSONValue = None,
        job: None | str = None,
        action: None | str = None,
    ) -> None:
        self.responses.append(
            JsonResponse(
                status_code=200,
                body={
                    "type": "OKResult",
                    "status": "OK",
                    "result": result,
                    "job": job,
                    "action": action,
                },
            )
        )

    def add_engine_error(self, details: str, status_code: int = 200) -> None:
        self.responses.append(
            JsonResponse(
                status_code=status_code,
                body={
                    "type": "ErrorResult",
                    "status": "ERROR",
                    "error": {"type": "APIError", "details": details},
                },
            )
        )

    def add_json(self, body: JSONDict, status_code: int = 200) -> None:
        self.responses.append(JsonResponse(status_code=status_code, body=body))

    def add_login(self) -> None:
        self.add_ok({"type": "APISession"})
        self.add_ok({"type": "User"})

    def add_job(self, state: str, summary: None | str = None) -> None:
        self.add_ok(
            {
                "type": "Job",
                "reference": "JOB-1",
                "jobState": state,
                "title": "Bookmark job",
                "events": [] if summary is None else [{"messageDetails": summary}],
            }
        )

    def add_action(self, state: str, title: str = "Create bookmark") -> None:
        self.add_ok(
            {
                "type": "Action",
                "reference": "ACTION-1",
                "title": title,
                "state": state,
            }
        )


@pytest.fixture
def http_wrapper() -> MockHttpWrapper:
    return MockHttpWrapper()


@pytest.fixture
def engine(http_wrapper: MockHttpWrapper) -> DelphixEngine:
    return DelphixEngine(
        address="engine.example.com",
        username="admin",
        password="secret",
        request_wrapper=http_wrapper,
        poll_interval_seconds=0,
    )
