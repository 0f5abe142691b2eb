from __future__ import annotations

from typing import Any


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, *, bad_json: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json

    def json(self) -> Any:
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


class FakeSession:
    """
    Stand-in for requests.Session.

    Routes map a URL prefix to a response, a list of responses (served in
    order, last one repeated) or a callable receiving the call kwargs.
    """

    def __init__(self, routes: dict[str, Any] | None = None):
        self.routes: dict[str, Any] = dict(routes or {})
        self.calls: list[dict[str, Any]] = []

    def _respond(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        call = {"method": method, "url": url, **kwargs}
        self.calls.append(call)
        for prefix in sorted(self.routes, key=len, reverse=True):
            if url.startswith(prefix):
                route = self.routes[prefix]
                if isinstance(route, Exception):
                    raise route
                if callable(route):
                    return route(call)
                if isinstance(route, list):
                    return route.pop(0) if len(route) > 1 else route[0]
                return route
        return FakeResponse(404, {})

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._respond("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._respond("POST", url, **kwargs)

    def calls_to(self, prefix: str) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["url"].startswith(prefix)]
