"""Runtime door travel and interaction dispatch."""

from .capabilities import Capability, InteractionDispatcher, capabilities_for
from .resolver import DoorTravelResolver, RuntimeWorld, ScreenFader, Traveler, TravelResult, TravelState

__all__ = [
    "Capability",
    "DoorTravelResolver",
    "InteractionDispatcher",
    "RuntimeWorld",
    "ScreenFader",
    "TravelResult",
    "TravelState",
    "Traveler",
    "capabilities_for",
]
