"""Frame-driven tick scheduling.

The host supplies `request_frame(callback)`, its "call me on the next
frame" primitive (a canvas animation frame, a GUI timer, an event loop
`call_soon`). The scheduler asks for exactly one frame at a time while the
simulation runs and stops asking once it settles. Without a host the
scheduler is driven by hand through `step()` or `run_until_stable()`.
"""

import logging
from typing import Callable

from kgviz.layout.simulation import ForceSimulation

logger = logging.getLogger(__name__)

FrameCallback = Callable[[], None]
RequestFrame = Callable[[FrameCallback], None]
TickListener = Callable[[ForceSimulation], None]


class TickScheduler:
    """Drives a ForceSimulation one tick per frame."""

    def __init__(
        self,
        simulation: ForceSimulation,
        request_frame: RequestFrame | None = None,
        ticks_per_frame: int = 1,
    ) -> None:
        self.request_frame = request_frame
        self.ticks_per_frame = max(1, ticks_per_frame)
        self._listeners: list[TickListener] = []
        self._end_listeners: list[TickListener] = []
        self._pending = False
        self._active = False
        self.simulation = simulation
        simulation.on_reheat(self._on_reheat)

    @property
    def pending(self) -> bool:
        """A frame has been requested and not yet delivered."""
        return self._pending

    @property
    def active(self) -> bool:
        return self._active

    def subscribe(self, listener: TickListener) -> None:
        """Call listener after every tick."""
        self._listeners.append(listener)

    def subscribe_end(self, listener: TickListener) -> None:
        """Call listener once each time the simulation settles."""
        self._end_listeners.append(listener)

    def attach(self, simulation: ForceSimulation) -> None:
        """Switch to a new simulation (model replacement)."""
        self.simulation.stop()
        self.simulation = simulation
        simulation.on_reheat(self._on_reheat)
        if self._active:
            self._schedule()

    def start(self) -> None:
        if not self._active:
            logger.info("Tick scheduler started")
        self._active = True
        self._schedule()

    def stop(self) -> None:
        """Cease requesting frames; a pending frame becomes a no-op."""
        if self._active:
            logger.info(f"Tick scheduler stopped after {self.simulation.state.ticks} ticks")
        self._active = False
        self.simulation.stop()

    def step(self) -> bool:
        """Run one frame's worth of ticks; returns whether more are wanted."""
        _, more = self._run_ticks(self.ticks_per_frame)
        return more

    def run_until_stable(self, max_ticks: int | None = None) -> int:
        """Tick synchronously until the simulation settles or max_ticks is hit.

        Returns the number of ticks actually run.
        """
        ticks = 0
        while self.simulation.running and (max_ticks is None or ticks < max_ticks):
            budget = self.ticks_per_frame
            if max_ticks is not None:
                budget = min(budget, max_ticks - ticks)
            ran, _ = self._run_ticks(budget)
            ticks += ran
        return ticks

    def _run_ticks(self, budget: int) -> tuple[int, bool]:
        """Tick up to budget times; returns (ticks run, still running)."""
        simulation = self.simulation
        if not simulation.running:
            return 0, False
        for ran in range(1, budget + 1):
            simulation.tick()
            for listener in self._listeners:
                listener(simulation)
            if not simulation.running:
                logger.debug(f"Simulation settled at tick {simulation.state.ticks}")
                for listener in self._end_listeners:
                    listener(simulation)
                return ran, False
        return budget, True

    def _schedule(self) -> None:
        if self._pending or self.request_frame is None or not self.simulation.running:
            return
        self._pending = True
        self.request_frame(self._on_frame)

    def _on_frame(self) -> None:
        self._pending = False
        if not self._active:
            return
        if self.step():
            self._schedule()

    def _on_reheat(self) -> None:
        if self._active:
            self._schedule()
