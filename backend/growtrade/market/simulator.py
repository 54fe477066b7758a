"""Random-walk market simulator."""

from __future__ import annotations

import asyncio
import logging

import numpy as np

from .hub import BroadcastHub
from .models import PriceEntry
from .seed_prices import MAX_MOVE, PRICE_FLOOR
from .table import PriceTable

logger = logging.getLogger(__name__)


class RandomWalk:
    """Bounded uniform random walk with a price floor.

    Math:
        pct       ~ Uniform(-max_move, +max_move)
        new_price = max(price * (1 + pct), floor)

    The floor is applied after every move, so a symbol seeded below it is
    lifted to the floor on its first tick.
    """

    def __init__(
        self,
        max_move: float = MAX_MOVE,
        floor: float = PRICE_FLOOR,
        rng: np.random.Generator | None = None,
    ) -> None:
        if max_move < 0:
            raise ValueError("max_move must be non-negative")
        if floor <= 0:
            raise ValueError("floor must be positive")
        self._max_move = max_move
        self._floor = floor
        self._rng = rng if rng is not None else np.random.default_rng()

    @property
    def max_move(self) -> float:
        return self._max_move

    @property
    def floor(self) -> float:
        return self._floor

    def draw(self) -> float:
        """One percentage move in [-max_move, +max_move]."""
        return float(self._rng.uniform(-self._max_move, self._max_move))

    def step(self, entry: PriceEntry, pct: float | None = None) -> PriceEntry:
        """Move one entry by ``pct`` (drawn if not given) and apply the floor."""
        if pct is None:
            pct = self.draw()
        new_price = max(entry.price * (1 + pct), self._floor)
        return PriceEntry(symbol=entry.symbol, price=new_price)


class PriceDriver:
    """Periodically perturbs the PriceTable and publishes it to the hub.

    Runs a background asyncio task that calls tick() every `interval`
    seconds. Each tick's publish is spawned as its own task, so slow
    connections never delay the next tick; the hub bounds every write.
    """

    def __init__(
        self,
        table: PriceTable,
        hub: BroadcastHub,
        interval: float = 3.0,
        walk: RandomWalk | None = None,
    ) -> None:
        self._table = table
        self._hub = hub
        self._interval = interval
        self._walk = walk or RandomWalk()
        self._task: asyncio.Task | None = None
        self._publishes: set[asyncio.Task] = set()
        self._ticks = 0

    async def start(self) -> None:
        """Start the tick loop. The first tick happens after one interval."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run_loop(), name="price-driver")
        logger.info(
            "Price driver started: %d symbols, %.1fs interval",
            len(self._table),
            self._interval,
        )

    async def stop(self) -> None:
        """Stop ticking and wait for in-flight publishes. Safe to call twice."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        if self._publishes:
            await asyncio.gather(*self._publishes, return_exceptions=True)
        logger.info("Price driver stopped after %d ticks", self._ticks)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def ticks(self) -> int:
        return self._ticks

    def tick(self) -> list[PriceEntry]:
        """Advance every symbol by one move. Returns the new snapshot."""
        snapshot = self._table.apply_perturbation(self._walk.step)
        self._ticks += 1
        for entry in snapshot:
            logger.debug("Updated %s price to %.2f", entry.symbol, entry.price)
        return snapshot

    # --- Internal ---

    async def _run_loop(self) -> None:
        """Core loop: sleep, tick, hand the snapshot to the hub."""
        while True:
            await asyncio.sleep(self._interval)
            try:
                snapshot = self.tick()
            except Exception:
                logger.exception("Price driver tick failed")
                continue
            self._schedule_publish(snapshot)

    def _schedule_publish(self, snapshot: list[PriceEntry]) -> None:
        task = asyncio.create_task(self._hub.publish(snapshot), name="price-publish")
        self._publishes.add(task)
        task.add_done_callback(self._publish_done)

    def _publish_done(self, task: asyncio.Task) -> None:
        self._publishes.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Price publish failed: %s", task.exception())
