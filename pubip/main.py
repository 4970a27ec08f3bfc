from __future__ import annotations

import logging
import sys

from pubip.config import load_config
from pubip.errors import ResolveError
from pubip.logging_setup import setup_logging
from pubip.resolver import Resolver


def main(argv: list[str] | None = None) -> int:
    try:
        config = load_config(argv=argv)
        setup_logging(config.log_level)
    except Exception as exc:  # noqa: BLE001
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    logger = logging.getLogger("pubip")
    logger.debug(
        "Starting pubip endpoints=%d max_tries=%d timeout=%ss quorum=%d",
        len(config.resolver.endpoints),
        config.resolver.max_tries,
        config.resolver.timeout_seconds,
        config.resolver.quorum,
    )

    try:
        ip = Resolver(config=config.resolver, logger=logger).resolve()
    except ResolveError as exc:
        logger.error("Could not determine public IP: %s", exc)
        return 1

    print(ip)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
