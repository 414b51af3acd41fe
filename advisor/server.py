from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Awaitable, Callable, Dict, List, Optional

from websockets.asyncio.server import ServerConnection, serve

from drawpoker.cards import cards_to_labels, random_hand
from drawpoker.evaluator import classify
from drawpoker.feedback import explain_hold, grade_hold
from drawpoker.models import InvalidHandError, InvalidHoldError, SolverConfig
from drawpoker.paytables import DEFAULT_VARIANT, PAYTABLES, Paytable
from drawpoker.solver import Solver

LOGGER = logging.getLogger("advisor")

# The advisor exposes the engine to UI clients over WebSocket. Solver calls
# can take a while, so they run on worker threads and never block the loop.


class AdvisorError(Exception):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


@dataclass
class AdvisorConfig:
    host: str = "0.0.0.0"
    port: int = 8765
    variant: str = DEFAULT_VARIANT
    cache_size: Optional[int] = 65_536
    workers: int = 1


def _error_payload(code: str, msg: str) -> Dict[str, Any]:
    return {"type": "error", "code": code, "msg": msg}


class AdvisorService:
    """Turns request messages into engine calls and engine results into replies."""

    def __init__(self, config: AdvisorConfig, solver: Optional[Solver] = None) -> None:
        if config.variant not in PAYTABLES:
            raise ValueError(f"Unknown paytable: {config.variant}")
        self.config = config
        self.solver = solver or Solver(SolverConfig(cache_size=config.cache_size, workers=config.workers))
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]] = {
            "paytables": self._handle_paytables,
            "deal": self._handle_deal,
            "classify": self._handle_classify,
            "expected_value": self._handle_expected_value,
            "optimal_hold": self._handle_optimal_hold,
            "rank_holds": self._handle_rank_holds,
            "grade": self._handle_grade,
        }

    async def handle_message(self, message: Dict[str, Any]) -> Dict[str, Any]:
        msg_type = message.get("type")
        handler = self._handlers.get(msg_type) if isinstance(msg_type, str) else None
        if handler is None:
            raise AdvisorError("UNKNOWN_TYPE", f"Unsupported message type: {msg_type!r}")
        try:
            result = await handler(message)
        except InvalidHandError as exc:
            raise AdvisorError("INVALID_HAND", str(exc)) from exc
        except InvalidHoldError as exc:
            raise AdvisorError("INVALID_HOLD", str(exc)) from exc
        reply: Dict[str, Any] = {"type": msg_type, **result}
        if "id" in message:
            reply["id"] = message["id"]
        return reply

    # Field access ----------------------------------------------------

    def _paytable(self, message: Dict[str, Any]) -> Paytable:
        variant = message.get("variant") or self.config.variant
        paytable = PAYTABLES.get(variant) if isinstance(variant, str) else None
        if paytable is None:
            raise AdvisorError("UNKNOWN_VARIANT", f"Unknown variant: {variant!r}")
        return paytable

    def _cards(self, message: Dict[str, Any]) -> List[str]:
        cards = message.get("cards")
        if not isinstance(cards, list) or not all(isinstance(card, str) for card in cards):
            raise AdvisorError("BAD_SCHEMA", "cards must be a list of card labels")
        return cards

    def _hold(self, message: Dict[str, Any]) -> List[int]:
        hold = message.get("hold")
        if not isinstance(hold, list):
            raise AdvisorError("BAD_SCHEMA", "hold must be a list of positions")
        return hold

    # Handlers --------------------------------------------------------

    async def _handle_paytables(self, message: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "default": self.config.variant,
            "paytables": {name: dict(table) for name, table in PAYTABLES.items()},
        }

    async def _handle_deal(self, message: Dict[str, Any]) -> Dict[str, Any]:
        seed = message.get("seed")
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            raise AdvisorError("BAD_SCHEMA", "seed must be an integer")
        return {"cards": cards_to_labels(random_hand(seed))}

    async def _handle_classify(self, message: Dict[str, Any]) -> Dict[str, Any]:
        return classify(self._cards(message), self._paytable(message)).as_dict()

    async def _handle_expected_value(self, message: Dict[str, Any]) -> Dict[str, Any]:
        cards, hold, paytable = self._cards(message), self._hold(message), self._paytable(message)
        ev = await asyncio.to_thread(self.solver.expected_value, cards, hold, paytable)
        return {"ev": ev}

    async def _handle_optimal_hold(self, message: Dict[str, Any]) -> Dict[str, Any]:
        cards, paytable = self._cards(message), self._paytable(message)
        best = await asyncio.to_thread(self.solver.get_optimal_hold, cards, paytable)
        return {**best.as_dict(), "explanation": explain_hold(cards, best.hold, best.ev, paytable)}

    async def _handle_rank_holds(self, message: Dict[str, Any]) -> Dict[str, Any]:
        cards, paytable = self._cards(message), self._paytable(message)
        limit = message.get("limit", 32)
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise AdvisorError("BAD_SCHEMA", "limit must be a positive integer")
        options = await asyncio.to_thread(self.solver.enumerate_hold_evs, cards, paytable)
        return {"holds": [option.as_dict() for option in options[:limit]]}

    async def _handle_grade(self, message: Dict[str, Any]) -> Dict[str, Any]:
        cards, hold, paytable = self._cards(message), self._hold(message), self._paytable(message)
        grade = await asyncio.to_thread(grade_hold, cards, hold, paytable, None, self.solver)
        return {**grade.as_dict(), "explanation": explain_hold(cards, hold, grade.player_ev, paytable)}


async def dispatch(service: AdvisorService, raw: str) -> Dict[str, Any]:
    try:
        message = json.loads(raw)
    except json.JSONDecodeError:
        return _error_payload("BAD_JSON", "Message is not valid JSON")
    if not isinstance(message, dict):
        return _error_payload("BAD_SCHEMA", "Message must be a JSON object")
    try:
        return await service.handle_message(message)
    except AdvisorError as exc:
        reply = _error_payload(exc.code, exc.msg)
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("Advisor request crashed (%s): %s", message.get("type"), exc)
        reply = _error_payload("INTERNAL", "Request failed")
    if "id" in message:
        reply["id"] = message["id"]
    return reply


async def handle_connection(websocket: ServerConnection, service: AdvisorService) -> None:
    # One reply per request, in request order.
    async for raw in websocket:
        reply = await dispatch(service, raw)
        await websocket.send(json.dumps(reply))


def _process_request(connection: ServerConnection, request):
    """Answer plain HTTP health checks; let WebSocket upgrades through."""

    if request.headers.get("Upgrade", "").lower() == "websocket":
        return None
    if request.path in {"/", "/health", "/healthz"}:
        return connection.respond(HTTPStatus.OK, "advisor running\n")
    return connection.respond(HTTPStatus.NOT_FOUND, "not found\n")


async def run_server(config: AdvisorConfig) -> None:
    service = AdvisorService(config)

    async def _handler(websocket: ServerConnection) -> None:
        await handle_connection(websocket, service)

    async with serve(_handler, config.host, config.port, process_request=_process_request):
        LOGGER.info("Advisor listening on %s:%s (default variant %s)", config.host, config.port, config.variant)
        await asyncio.Future()
