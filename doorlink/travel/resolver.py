"""
Runtime door travel.

Travel runs as a short state machine. Every asynchronous state has exactly one
suspension point, and the cancellation token is checked between states:

    FADING_OUT -> LOADING -> TELEPORTING -> SETTLING -> FADING_IN -> NOTIFYING_ENTERED

The screen is opaque from the end of FADING_OUT until FADING_IN, so the
document swap and the teleport are never visible. Links are expected to have
passed validation; a destination door that cannot be found raises KeyError.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from ..cancellation import CancellationToken
from ..models import Document, Door, Vector2
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class TravelState(str, Enum):
    """States of a single travel."""

    IDLE = "idle"
    FADING_OUT = "fading_out"
    LOADING = "loading"
    TELEPORTING = "teleporting"
    SETTLING = "settling"
    FADING_IN = "fading_in"
    NOTIFYING_ENTERED = "notifying_entered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RuntimeWorld(Protocol):
    """The running simulation: the current document and document loading."""

    @property
    def current_document(self) -> Document: ...

    async def load_document(self, document_guid: str) -> Document:
        """Replace the current document with the one for document_guid."""
        ...


class ScreenFader(Protocol):
    async def fade_out(self, duration: float) -> None: ...

    async def fade_in(self, duration: float) -> None: ...


class Traveler(Protocol):
    def teleport_to(self, position: Vector2) -> None: ...


EnteredListener = Callable[[Door], None]


@dataclass
class TravelResult:
    """Outcome of a travel request."""

    source: Door
    state: TravelState = TravelState.IDLE
    destination: Door | None = None
    destination_document_guid: str = ""
    loaded_document: bool = False
    states: list[TravelState] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return self.state is TravelState.COMPLETED


class DoorTravelResolver:
    """Moves a traveler through a door to the door it links to."""

    def __init__(
        self,
        world: RuntimeWorld,
        fader: ScreenFader,
        traveler: Traveler,
        fade_out_seconds: float = 0.35,
        fade_in_seconds: float = 0.35,
        settle_seconds: float = 0.1,
    ):
        self.world = world
        self.fader = fader
        self.traveler = traveler
        self.fade_out_seconds = fade_out_seconds
        self.fade_in_seconds = fade_in_seconds
        self.settle_seconds = settle_seconds
        self._entered_listeners: list[EnteredListener] = []

    @classmethod
    def from_config(cls, config, world: RuntimeWorld, fader: ScreenFader, traveler: Traveler) -> "DoorTravelResolver":
        """Build a resolver using the timings from AppConfig.travel."""
        return cls(
            world,
            fader,
            traveler,
            fade_out_seconds=config.travel.fade_out_seconds,
            fade_in_seconds=config.travel.fade_in_seconds,
            settle_seconds=config.travel.settle_seconds,
        )

    def add_entered_listener(self, listener: EnteredListener) -> None:
        """Register a callback fired for the source door, then the destination door."""
        self._entered_listeners.append(listener)

    async def travel(self, source: Door, cancel_token: CancellationToken | None = None) -> TravelResult:
        """
        Travel through source to the door its link points at.

        Cancellation is honoured between states. A travel cancelled after the
        fade out still fades back in so the screen is not left opaque.

        Raises:
            KeyError: The destination door is not present in the target document
        """
        token = cancel_token or CancellationToken()
        result = TravelResult(source=source)
        link = source.link
        result.destination_document_guid = link.target_document_guid

        def enter(state: TravelState) -> None:
            result.state = state
            result.states.append(state)

        logger.info(
            "Door travel started",
            door_id=source.door_id,
            target_document_guid=link.target_document_guid,
            target_door_id=link.target_door_id,
        )

        if token.cancelled:
            enter(TravelState.CANCELLED)
            return result

        enter(TravelState.FADING_OUT)
        await self.fader.fade_out(self.fade_out_seconds)

        if token.cancelled:
            return await self._cancel_visible(result, enter)

        enter(TravelState.LOADING)
        document = self.world.current_document
        if document.guid != link.target_document_guid:
            document = await self.world.load_document(link.target_document_guid)
            result.loaded_document = True

        if token.cancelled:
            return await self._cancel_visible(result, enter)

        enter(TravelState.TELEPORTING)
        destination = document.door(link.target_door_id)
        result.destination = destination
        self.traveler.teleport_to(destination.entry_position())

        enter(TravelState.SETTLING)
        await asyncio.sleep(self.settle_seconds)

        enter(TravelState.FADING_IN)
        await self.fader.fade_in(self.fade_in_seconds)

        enter(TravelState.NOTIFYING_ENTERED)
        for door in (source, destination):
            for listener in list(self._entered_listeners):
                listener(door)

        enter(TravelState.COMPLETED)
        logger.info(
            "Door travel completed",
            door_id=source.door_id,
            destination_door_id=destination.door_id,
            loaded_document=result.loaded_document,
        )
        return result

    async def _cancel_visible(self, result: TravelResult, enter: Callable[[TravelState], None]) -> TravelResult:
        enter(TravelState.FADING_IN)
        await self.fader.fade_in(self.fade_in_seconds)
        enter(TravelState.CANCELLED)
        logger.info("Door travel cancelled", door_id=result.source.door_id, loaded_document=result.loaded_document)
        return result
