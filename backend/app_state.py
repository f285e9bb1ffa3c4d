"""Process-wide engine handles: one registry and the simulator that moves its objects."""
from tracker_core.location_simulator import LocationSimulator
from tracker_core.registry import ObjectRegistry
from utils.config import HISTORY_LIMIT, TICK_INTERVAL_S

registry = ObjectRegistry(history_limit=HISTORY_LIMIT)
simulator = LocationSimulator(registry, interval_s=TICK_INTERVAL_S)


def get_registry() -> ObjectRegistry:
    """FastAPI dependency: the registry shared by API, simulator and scan correlation."""
    return registry


def get_simulator() -> LocationSimulator:
    """FastAPI dependency: the tick loop driving the registry's tracked objects."""
    return simulator
