import asyncio
import json
import logging
import random
import time
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple

import pandas as pd

from .config import LIGHT_TOGGLE_SECONDS
from .models import LatLng, LightState, TrafficLight, red_lights

logger = logging.getLogger(__name__)


def load_light_specs(path: str) -> List[LatLng]:
    """
    Read traffic light locations from a GeoJSON or CSV file.
    Returns (lat, lng) pairs, or an empty list if the file can't be used.
    """
    try:
        if path.lower().endswith(".csv"):
            df = pd.read_csv(path)
            return [(float(row["lat"]), float(row["lng"])) for _, row in df.iterrows()]

        with open(path, "r") as f:
            data = json.load(f)

        specs = []
        for feature in data.get("features", []):
            # GeoJSON stores [lng, lat]
            lng, lat = feature["geometry"]["coordinates"][:2]
            specs.append((float(lat), float(lng)))
        return specs
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning("Could not load traffic lights from %s: %s", path, e)
        return []


class TrafficLightRegistry:
    """Holds the simulated state of every known traffic light."""

    def __init__(self):
        self._lights: Tuple[TrafficLight, ...] = ()

    def __len__(self) -> int:
        return len(self._lights)

    def load(self, light_specs: Sequence[LatLng], rng: Optional[random.Random] = None) -> None:
        """Create one light per (lat, lng) with a coin-flip starting state."""
        rng = rng or random.Random()
        self._lights = tuple(
            TrafficLight(
                id=i,
                latitude=lat,
                longitude=lng,
                state=LightState.RED if rng.random() > 0.5 else LightState.GREEN,
            )
            for i, (lat, lng) in enumerate(light_specs)
        )
        logger.info("Traffic lights loaded: %d", len(self._lights))

    def tick(self) -> None:
        """Flip every light between red and green."""
        # Rebind in one step so readers never see a partially flipped set
        self._lights = tuple(replace(light, state=light.state.flipped()) for light in self._lights)

    def snapshot(self) -> Tuple[TrafficLight, ...]:
        """Read-only view of the lights as they are right now."""
        return self._lights

    def red_lights(self) -> List[TrafficLight]:
        """Lights showing red in the current snapshot."""
        return red_lights(self._lights)


class LightTicker:
    """
    Flips the registry on a fixed period.

    Event-loop hosts call start()/stop(); hosts that rerun a script call
    poll() with the current monotonic time instead.
    """

    def __init__(
        self,
        registry: TrafficLightRegistry,
        period_s: float = LIGHT_TOGGLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.registry = registry
        self.period_s = period_s
        self.clock = clock
        self._last_tick = clock()
        self._callbacks: List[Callable[[], None]] = []
        self._task: Optional[asyncio.Task] = None

    def on_tick(self, callback: Callable[[], None]) -> None:
        """Register a callback to run after every flip."""
        self._callbacks.append(callback)

    def fire(self) -> None:
        """Flip the lights now and notify callbacks."""
        self.registry.tick()
        for callback in self._callbacks:
            callback()

    def poll(self, now: Optional[float] = None) -> int:
        """Apply every tick that came due since the last one. Returns the count."""
        now = self.clock() if now is None else now
        due = int((now - self._last_tick) // self.period_s)
        for _ in range(due):
            self.fire()
        self._last_tick += due * self.period_s
        return due

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the flip loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        """Cancel the flip loop, if one is running."""
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.period_s)
            self._last_tick = self.clock()
            self.fire()
