#!/usr/bin/env python3
"""Send one request to a running advisor and print the reply.

Example:
    python scripts/advisor_client.py optimal_hold --cards Ah Ad 7c 5s 2h
    python scripts/advisor_client.py grade --cards 7h 7d Kh Qh 9h --hold 0 1
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any, Dict

import websockets

logging.basicConfig(level=logging.INFO)
LOGGER = logging.getLogger("advisor_client")


async def request(url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    async with websockets.connect(url) as ws:
        await ws.send(json.dumps(payload))
        raw = await ws.recv()
    return json.loads(raw)


def main() -> None:
    parser = argparse.ArgumentParser(description="One-shot advisor client")
    parser.add_argument(
        "type",
        choices=["paytables", "deal", "classify", "expected_value", "optimal_hold", "rank_holds", "grade"],
    )
    parser.add_argument("--url", default="ws://127.0.0.1:8765")
    parser.add_argument("--cards", nargs="*")
    parser.add_argument("--hold", nargs="*", type=int)
    parser.add_argument("--variant")
    parser.add_argument("--seed", type=int)
    parser.add_argument("--limit", type=int)
    args = parser.parse_args()

    payload: Dict[str, Any] = {"type": args.type}
    for field in ("cards", "hold", "variant", "seed", "limit"):
        value = getattr(args, field)
        if value is not None:
            payload[field] = value

    reply = asyncio.run(request(args.url, payload))
    if reply.get("type") == "error":
        LOGGER.error("%s: %s", reply.get("code"), reply.get("msg"))
    print(json.dumps(reply, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
