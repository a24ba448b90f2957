"""
Entity capabilities and interaction dispatch.

Capabilities are resolved once per entity, when its model is built. The dispatcher
routes an interaction to the travel resolver for travel-capable entities.
"""

from collections.abc import Awaitable, Callable

from ..cancellation import CancellationToken
from ..models import Capability, Door, Prop
from ..structured_logging.enhanced_logging_config import get_logger
from .resolver import DoorTravelResolver, TravelResult

logger = get_logger(__name__)


def capabilities_for(entity: Door | Prop) -> Capability:
    """
    Capabilities resolved when the entity was built.

    Doors can be interacted with and travelled through; props only when
    flagged interactable.
    """
    return entity.capabilities


PropHandler = Callable[[Prop], Awaitable[None]]


class InteractionDispatcher:
    """Routes the interact action to the handler for the entity's capability."""

    def __init__(self, resolver: DoorTravelResolver, prop_handler: PropHandler | None = None):
        self.resolver = resolver
        self.prop_handler = prop_handler

    async def interact(
        self, entity: Door | Prop, cancel_token: CancellationToken | None = None
    ) -> TravelResult | None:
        """
        Handle an interaction with entity.

        Returns:
            The travel result for travel-capable entities, otherwise None
        """
        capabilities = capabilities_for(entity)

        if Capability.TRAVEL in capabilities and isinstance(entity, Door):
            return await self.resolver.travel(entity, cancel_token)

        if Capability.INTERACTABLE in capabilities and isinstance(entity, Prop):
            if self.prop_handler is not None:
                await self.prop_handler(entity)
            return None

        logger.debug("Interaction ignored", entity=entity.name)
        return None
