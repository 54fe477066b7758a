"""Market data subsystem for GrowTrade.

Public API:
    PriceEntry          - Immutable symbol/price pair
    PriceTable          - Thread-safe table of current prices
    RandomWalk          - Bounded random move with a price floor
    PriceDriver         - Background task that ticks the table and publishes
    BroadcastHub        - Fan-out of snapshots to streaming connections
    StreamConnection    - Abstract interface for streaming transports
    create_stream_router - FastAPI router factory for the WebSocket endpoint
"""

from .hub import BroadcastHub
from .interface import StreamConnection
from .models import PriceEntry, encode_snapshot
from .seed_prices import SEED_PRICES
from .simulator import PriceDriver, RandomWalk
from .stream import create_stream_router
from .table import PriceTable

__all__ = [
    "PriceEntry",
    "PriceTable",
    "RandomWalk",
    "PriceDriver",
    "BroadcastHub",
    "StreamConnection",
    "SEED_PRICES",
    "encode_snapshot",
    "create_stream_router",
]
