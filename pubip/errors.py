from __future__ import annotations

from typing import Iterable, Sequence


class PubIPError(RuntimeError):
    pass


class FetchError(PubIPError):
    """A single endpoint failed to produce an address."""

    def __init__(self, endpoint: str, message: str) -> None:
        super().__init__(f"{endpoint}: {message}")
        self.endpoint = endpoint


class UnexpectedStatusError(FetchError):
    def __init__(self, endpoint: str, status_code: int, body: str) -> None:
        super().__init__(endpoint, f"status code {status_code}, body: {body}")
        self.status_code = status_code
        self.body = body


class InvalidAddressError(FetchError):
    def __init__(self, endpoint: str, text: str) -> None:
        super().__init__(endpoint, f"IP address not valid: {text}")
        self.text = text


class EndpointUnreachableError(FetchError):
    def __init__(self, endpoint: str, attempts: int) -> None:
        super().__init__(endpoint, f"failed to reach after {attempts} attempts")
        self.attempts = attempts


class FetchCancelledError(FetchError):
    def __init__(self, endpoint: str) -> None:
        super().__init__(endpoint, "cancelled before a response was received")


class ResolveError(PubIPError):
    """Resolution failed as a whole.

    The string form is the summary line followed by every individual
    endpoint error, one per line.
    """

    def __init__(self, message: str, errors: Iterable[Exception] = ()) -> None:
        self.message = message
        self.errors: list[Exception] = list(errors)
        lines = [message, *(str(error) for error in self.errors)]
        super().__init__("\n".join(lines))


class NotEnoughResultsError(ResolveError):
    def __init__(
        self,
        received: int,
        endpoint_count: int,
        quorum: int,
        errors: Iterable[Exception] = (),
    ) -> None:
        super().__init__(
            f"Less than {quorum} results from {endpoint_count} APIs (got {received})",
            errors,
        )
        self.received = received
        self.endpoint_count = endpoint_count
        self.quorum = quorum


class ResultsDisagreeError(ResolveError):
    def __init__(self, results: Sequence[str], errors: Iterable[Exception] = ()) -> None:
        self.results = list(results)
        self.distinct = sorted(set(self.results))
        super().__init__(
            f"Results are not identical: {self.results} (distinct: {', '.join(self.distinct)})",
            errors,
        )
