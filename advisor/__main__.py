import argparse
import asyncio
import logging

from drawpoker.paytables import DEFAULT_VARIANT, PAYTABLES

from .server import AdvisorConfig, run_server

logging.basicConfig(level=logging.INFO)


def main() -> None:
    parser = argparse.ArgumentParser(description="Video poker strategy advisor")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8765)
    parser.add_argument("--variant", default=DEFAULT_VARIANT, choices=sorted(PAYTABLES))
    parser.add_argument("--cache-size", type=int, default=65_536, help="Max cached EV entries (0 disables caching)")
    parser.add_argument("--workers", type=int, default=1, help="Threads used to score the 32 holds of one hand")
    parser.add_argument("--debug", action="store_true", help="Log every EV computation")
    args = parser.parse_args()

    if args.debug:
        logging.getLogger("drawpoker").setLevel(logging.DEBUG)

    config = AdvisorConfig(
        host=args.host,
        port=args.port,
        variant=args.variant,
        cache_size=args.cache_size,
        workers=args.workers,
    )
    asyncio.run(run_server(config))


if __name__ == "__main__":
    main()
