from __future__ import annotations

import logging
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Sequence

import requests

from pubip.backoff import Backoff
from pubip.config import ResolverConfig
from pubip.errors import FetchError, NotEnoughResultsError, ResultsDisagreeError
from pubip.fetcher import fetch_ip


@dataclass(frozen=True)
class FetchResult:
    endpoint: str
    ip: str | None = None
    error: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.ip is not None


def validate(
    ips: Sequence[str],
    errors: Sequence[Exception],
    endpoint_count: int,
    quorum: int = 3,
) -> str:
    if len(ips) < quorum:
        raise NotEnoughResultsError(len(ips), endpoint_count, quorum, errors)
    first = ips[0]
    if any(ip != first for ip in ips[1:]):
        raise ResultsDisagreeError(ips, errors)
    return first


class Resolver:
    """Asks every configured endpoint at once and returns the address they agree on.

    Each endpoint is fetched on its own thread; outcomes flow back through a
    queue in arrival order. Collection stops when every endpoint has reported
    or ``timeout_seconds`` elapses, whichever comes first. Outstanding fetches
    are told to stop and their results are dropped.
    """

    def __init__(
        self,
        config: ResolverConfig | None = None,
        logger: logging.Logger | None = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self._config = config or ResolverConfig()
        self._config.validate()
        self._logger = logger or logging.getLogger(__name__)
        self._session_factory = session_factory

    def _new_backoff(self) -> Backoff:
        return Backoff(
            min_seconds=self._config.backoff_min_seconds,
            max_seconds=self._config.backoff_max_seconds,
            factor=self._config.backoff_factor,
            jitter=self._config.backoff_jitter,
        )

    def _worker(self, endpoint: str, results: queue.Queue[FetchResult], cancel: threading.Event) -> None:
        session = self._session_factory()
        try:
            ip = fetch_ip(
                endpoint,
                max_tries=self._config.max_tries,
                request_timeout_seconds=self._config.request_timeout_seconds,
                backoff=self._new_backoff(),
                session=session,
                logger=self._logger,
                cancel=cancel,
            )
        except FetchError as exc:
            results.put(FetchResult(endpoint=endpoint, error=exc))
        except Exception as exc:  # noqa: BLE001
            self._logger.exception("Unexpected error fetching %s: %s", endpoint, exc)
            results.put(FetchResult(endpoint=endpoint, error=FetchError(endpoint, f"unexpected error: {exc}")))
        else:
            results.put(FetchResult(endpoint=endpoint, ip=ip))
        finally:
            session.close()

    def resolve(self) -> str:
        endpoints = self._config.endpoints
        results: queue.Queue[FetchResult] = queue.Queue()
        cancel = threading.Event()
        ips: list[str] = []
        errors: list[FetchError] = []

        self._logger.info(
            "Resolving public IP from %d endpoints (quorum=%d timeout=%ss)",
            len(endpoints),
            self._config.quorum,
            self._config.timeout_seconds,
        )
        deadline = time.monotonic() + self._config.timeout_seconds
        executor = ThreadPoolExecutor(max_workers=len(endpoints), thread_name_prefix="pubip")
        try:
            for endpoint in endpoints:
                executor.submit(self._worker, endpoint, results, cancel)

            while len(ips) + len(errors) < len(endpoints):
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                try:
                    result = results.get(timeout=remaining)
                except queue.Empty:
                    break
                if result.ok:
                    self._logger.debug("%s reported %s", result.endpoint, result.ip)
                    ips.append(result.ip)
                else:
                    self._logger.debug("%s failed: %s", result.endpoint, result.error)
                    errors.append(result.error)
        finally:
            cancel.set()
            executor.shutdown(wait=False, cancel_futures=True)

        pending = len(endpoints) - len(ips) - len(errors)
        if pending:
            self._logger.warning("Timed out waiting for %d of %d endpoints.", pending, len(endpoints))

        ip = validate(ips, errors, len(endpoints), self._config.quorum)
        self._logger.info("Resolved public IP %s from %d agreeing endpoints", ip, len(ips))
        return ip


def resolve(config: ResolverConfig | None = None, logger: logging.Logger | None = None) -> str:
    return Resolver(config=config, logger=logger).resolve()
