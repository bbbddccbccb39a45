"""Lifecycle base for depot services.

Services own backend connections, so they are used as async context
managers: ``initialize`` opens the backends and ``cleanup`` releases them.
"""

from abc import ABC, abstractmethod
import structlog


class ServiceBase(ABC):
    """Service holding backend handles for the duration of a command.

    Each instance logs through its own logger bound with ``service``, so
    events from the coordinator and its collaborators can be told apart.
    """

    def __init__(self):
        self.logger = structlog.get_logger(__name__).bind(
            service=self.__class__.__name__
        )

    @abstractmethod
    async def initialize(self) -> None:
        """Open backends and create whatever storage they need."""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Release backend connections."""
        pass

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.cleanup()
