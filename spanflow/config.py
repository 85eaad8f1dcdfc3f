"""Configuration classes for spanflow components."""

from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Numeric thresholds shared by the graph algorithms and loaders."""

    # Residual capacity must be strictly above this for an edge to carry flow
    residual_epsilon: float = 0.0

    # Residual at or below this marks an edge as saturated in flow summaries
    saturation_tolerance: float = 1e-10

    # Capacity assigned to edges that do not specify one (loaders, NetworkX import)
    default_capacity: float = 1.0

    def is_traversable(self, capacity: float, flow: float) -> bool:
        """Return True if an edge with this capacity and flow has usable residual."""
        return capacity - flow > self.residual_epsilon

    def is_saturated(self, capacity: float, flow: float) -> bool:
        """Return True if the edge has no meaningful residual capacity left."""
        return capacity - flow <= self.saturation_tolerance


# Global configuration instance
ENGINE_CONFIG = EngineConfig()
