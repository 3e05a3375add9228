from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Sequence, Tuple

# (lat, lng)
LatLng = Tuple[float, float]


class LightState(Enum):
    RED = "red"
    GREEN = "green"

    def flipped(self) -> "LightState":
        return LightState.GREEN if self is LightState.RED else LightState.RED


class SessionPhase(Enum):
    IDLE = "idle"
    AWAITING_END = "awaiting_end"


@dataclass(frozen=True)
class TrafficLight:
    """A simulated signal at a fixed location."""
    id: int
    latitude: float
    longitude: float
    state: LightState


@dataclass(frozen=True)
class RouteStep:
    """One turn-by-turn step of a route segment."""
    distance_m: float
    duration_s: float
    name: str = ""


@dataclass(frozen=True)
class RouteCandidate:
    """A route returned by the directions service."""
    geometry: Tuple[LatLng, ...]
    base_duration_s: float
    steps: Tuple[RouteStep, ...] = ()
    distance_m: float = 0.0


@dataclass(frozen=True)
class ScoredRoute:
    """A candidate with red-light delay applied."""
    candidate: RouteCandidate
    index: int
    base_seconds: float
    penalty_seconds: float = 0.0
    penalized_lights: int = 0

    @property
    def total_seconds(self) -> float:
        return self.base_seconds + self.penalty_seconds


def red_lights(lights: Sequence[TrafficLight]) -> List[TrafficLight]:
    """Only the lights currently showing red."""
    return [light for light in lights if light.state is LightState.RED]


@dataclass
class Session:
    """Everything tied to one start/end request."""
    phase: SessionPhase = SessionPhase.IDLE
    start: Optional[LatLng] = None
    end: Optional[LatLng] = None
    candidates: List[RouteCandidate] = field(default_factory=list)
    scored: List[ScoredRoute] = field(default_factory=list)
    best_index: Optional[int] = None
    selected_index: Optional[int] = None
    generation: int = 0

    @property
    def active_index(self) -> Optional[int]:
        if self.selected_index is not None:
            return self.selected_index
        return self.best_index

    def clear(self) -> None:
        self.phase = SessionPhase.IDLE
        self.start = None
        self.end = None
        self.candidates = []
        self.scored = []
        self.best_index = None
        self.selected_index = None
        self.generation += 1
