"""WebSocket analysis service wrapping the draw-poker engine."""

from .server import AdvisorConfig, AdvisorService, run_server

__all__ = ["AdvisorConfig", "AdvisorService", "run_server"]
