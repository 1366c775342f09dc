"""
settings.py — User-Facing Configuration
========================================
Everything the sidebar controls, parsed from a request body at the
moment of each action (nothing here is cached between requests).

    settings = Settings.from_mapping(request.get_json() or {})
    settings.density_fraction     # 0.0–1.0 for the generator

Bad values raise InvalidSetting, which the web layer turns into a 400.
"""

from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional

from algorithms import REGISTRY
from engine.history import HISTORY_CAP
from engine.playback import SPEED_DEFAULT, SPEED_MAX, SPEED_MIN
from graph import Graph, MAX_LABELS
from graph.errors import InvalidSetting, NotFound
from graph.generator import TOPOLOGIES


MIN_NODES     = 2
MAX_NODES     = MAX_LABELS
SPEED_LEVELS  = range(SPEED_MIN, SPEED_MAX + 1)

__all__ = [
    "Settings", "MIN_NODES", "MAX_NODES", "SPEED_LEVELS", "HISTORY_CAP",
]


@dataclass
class Settings:
    algorithm:   str            = "prim"
    node_count:  int            = 8
    density:     int            = 30         # percent of all possible edges
    topology:    str            = "random"
    speed:       int            = SPEED_DEFAULT
    start_node:  Optional[str]  = None       # label ("A") or id ("0"); Prim only
    seed:        Optional[int]  = None

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------
    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base: Optional["Settings"] = None) -> "Settings":
        """
        Build Settings from a JSON / form mapping.  Missing keys fall back to
        `base` (or the defaults).  Raises InvalidSetting on the first bad value.
        """
        s = cls(**asdict(base)) if base is not None else cls()

        if "algorithm" in data:
            s.algorithm = str(data["algorithm"]).lower()
        if "node_count" in data:
            s.node_count = _as_int("node_count", data["node_count"])
        if "density" in data:
            s.density = _as_int("density", data["density"])
        if "topology" in data:
            s.topology = str(data["topology"]).lower()
        if "speed" in data:
            s.speed = _as_int("speed", data["speed"])
        if "start_node" in data:
            raw = data["start_node"]
            s.start_node = None if raw in (None, "") else str(raw).strip()
        if "seed" in data:
            raw = data["seed"]
            s.seed = None if raw in (None, "") else _as_int("seed", raw)

        s.validate()
        return s

    def validate(self) -> None:
        if self.algorithm not in REGISTRY:
            raise InvalidSetting(f"Unknown algorithm {self.algorithm!r}; expected one of {', '.join(REGISTRY)}")
        if not MIN_NODES <= self.node_count <= MAX_NODES:
            raise InvalidSetting(f"Node count must be between {MIN_NODES} and {MAX_NODES}, got {self.node_count}")
        if not 0 <= self.density <= 100:
            raise InvalidSetting(f"Density must be between 0 and 100, got {self.density}")
        if self.topology not in TOPOLOGIES:
            raise InvalidSetting(f"Unknown topology {self.topology!r}; expected one of {', '.join(TOPOLOGIES)}")
        if self.speed not in SPEED_LEVELS:
            raise InvalidSetting(f"Speed must be between {SPEED_MIN} and {SPEED_MAX}, got {self.speed}")

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------
    @property
    def density_fraction(self) -> float:
        return self.density / 100.0

    def resolve_start(self, graph: Graph) -> Optional[int]:
        """Map `start_node` to a live node id.  None means "first node"."""
        if self.start_node is None:
            return None
        node = graph.node_by_label(self.start_node.upper())
        if node is not None:
            return node.id
        if self.start_node.isdigit() and int(self.start_node) in graph.nodes:
            return int(self.start_node)
        raise NotFound(f"Start node {self.start_node!r} does not exist")

    def to_dict(self) -> dict:
        return asdict(self)


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidSetting(f"{name} must be an integer, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidSetting(f"{name} must be an integer, got {value!r}") from None
    if not number.is_integer():
        raise InvalidSetting(f"{name} must be an integer, got {value!r}")
    return int(number)
