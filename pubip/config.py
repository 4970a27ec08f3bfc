from __future__ import annotations

import argparse
import os
from dataclasses import dataclass

DEFAULT_ENDPOINTS = (
    "https://api.ipify.org",
    "https://ipinfo.io/ip",
    "https://icanhazip.com",
    "https://ifconfig.me/ip",
    "https://ident.me",
    "https://checkip.amazonaws.com",
    "https://ipecho.net/plain",
    "https://myexternalip.com/raw",
    "https://wtfismyip.com/text",
)


def _parse_bool(value: str | bool | None, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value: {value}")


@dataclass(frozen=True)
class ResolverConfig:
    endpoints: tuple[str, ...] = DEFAULT_ENDPOINTS
    max_tries: int = 3
    timeout_seconds: float = 2.0
    request_timeout_seconds: float = 2.0
    quorum: int = 3
    backoff_min_seconds: float = 0.1
    backoff_max_seconds: float = 10.0
    backoff_factor: float = 2.0
    backoff_jitter: bool = True

    def validate(self) -> None:
        if not self.endpoints:
            raise ValueError("At least one endpoint is required.")
        if self.max_tries <= 0:
            raise ValueError(f"max_tries must be > 0, got {self.max_tries}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.request_timeout_seconds <= 0:
            raise ValueError(f"request_timeout_seconds must be > 0, got {self.request_timeout_seconds}")
        if self.quorum <= 0:
            raise ValueError(f"quorum must be > 0, got {self.quorum}")
        if self.backoff_min_seconds < 0 or self.backoff_max_seconds < 0:
            raise ValueError("Backoff durations must be >= 0.")


@dataclass(frozen=True)
class AppConfig:
    resolver: ResolverConfig
    log_level: str


def load_config(argv: list[str] | None = None) -> AppConfig:
    parser = argparse.ArgumentParser(description="Resolve this host's public IP address by consensus.")
    parser.add_argument(
        "--endpoint",
        action="append",
        dest="endpoints",
        help="IP reporting endpoint URL. Repeat for several (default from env or built-in list).",
    )
    parser.add_argument("--timeout", type=float, help="Overall resolution timeout in seconds (default 2).")
    parser.add_argument("--max-tries", type=int, help="Attempts per endpoint on connection failure (default 3).")
    parser.add_argument("--quorum", type=int, help="Number of agreeing responses required (default 3).")

    args = parser.parse_args(argv)

    if args.endpoints:
        endpoints = tuple(entry.strip() for entry in args.endpoints if entry.strip())
    else:
        endpoints_raw = os.getenv("PUBIP_ENDPOINTS", "")
        if endpoints_raw.strip():
            endpoints = tuple(entry.strip() for entry in endpoints_raw.split(",") if entry.strip())
        else:
            endpoints = DEFAULT_ENDPOINTS

    timeout = args.timeout if args.timeout is not None else float(os.getenv("PUBIP_TIMEOUT_SECONDS", "2"))
    request_timeout = float(os.getenv("PUBIP_REQUEST_TIMEOUT_SECONDS", str(timeout)))
    max_tries = args.max_tries if args.max_tries is not None else int(os.getenv("PUBIP_MAX_TRIES", "3"))
    quorum = args.quorum if args.quorum is not None else int(os.getenv("PUBIP_QUORUM", "3"))
    jitter = _parse_bool(os.getenv("PUBIP_BACKOFF_JITTER"), default=True)

    resolver = ResolverConfig(
        endpoints=endpoints,
        max_tries=max_tries,
        timeout_seconds=timeout,
        request_timeout_seconds=request_timeout,
        quorum=quorum,
        backoff_jitter=jitter,
    )
    resolver.validate()

    return AppConfig(resolver=resolver, log_level=os.getenv("LOG_LEVEL", "INFO"))
