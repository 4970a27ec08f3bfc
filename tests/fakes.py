from __future__ import annotations

import threading
from typing import Callable

import requests


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code


Step = Callable[[], FakeResponse]


def respond(text: str, status_code: int = 200) -> Step:
    return lambda: FakeResponse(text, status_code)


def reset() -> Step:
    def step() -> FakeResponse:
        raise requests.ConnectionError("connection reset by peer")

    return step


def hang(release: threading.Event) -> Step:
    def step() -> FakeResponse:
        release.wait(5)
        return FakeResponse("198.51.100.99")

    return step


class FakeSession:
    """Plays back one step per request; the last step repeats."""

    def __init__(self, *steps: Step) -> None:
        self._steps = list(steps)
        self.calls = 0
        self.closed = False

    def get(self, url: str, timeout: float) -> FakeResponse:
        step = self._steps[min(self.calls, len(self._steps) - 1)]
        self.calls += 1
        return step()

    def close(self) -> None:
        self.closed = True


class SessionsByEndpoint:
    """Session factory handing out one scripted FakeSession per endpoint URL."""

    def __init__(self, scripts: dict[str, list[Step]]) -> None:
        self._scripts = scripts
        self._lock = threading.Lock()
        self.sessions: dict[str, FakeSession] = {}

    def __call__(self) -> "_RoutingSession":
        return _RoutingSession(self)

    def session_for(self, url: str) -> FakeSession:
        with self._lock:
            if url not in self.sessions:
                self.sessions[url] = FakeSession(*self._scripts[url])
            return self.sessions[url]


class _RoutingSession:
    def __init__(self, owner: SessionsByEndpoint) -> None:
        self._owner = owner

    def get(self, url: str, timeout: float) -> FakeResponse:
        return self._owner.session_for(url).get(url, timeout=timeout)

    def close(self) -> None:
        pass
