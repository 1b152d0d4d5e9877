import logging
from typing import Any, Dict, Optional

from .errors import TypesenseConflictError
from .schemas import QUESTIONS_COLLECTION, questions_schema
from .typesense_client import TypesenseClient


logger = logging.getLogger(__name__)


class CollectionManager:
    """Provisions the questions collection; never alters or drops it."""

    def __init__(
        self,
        client: TypesenseClient,
        name: str = QUESTIONS_COLLECTION,
        *,
        schema: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.client = client
        self.name = name
        self.schema = schema or questions_schema(name)

    async def ensure_collection(self) -> bool:
        """Create the collection if it is missing.

        Backend "not ready" answers are retried by the client; anything
        that still fails is raised to the caller.

        Returns:
            True if the collection was created by this call.
        """
        if await self.client.collection_exists(self.name):
            logger.info("Collection '%s' already exists.", self.name)
            return False

        logger.info("Creating collection '%s'.", self.name)
        try:
            await self.client.create_collection(self.schema)
        except TypesenseConflictError:
            # Another replica created it between the lookup and the create.
            logger.info("Collection '%s' was created concurrently.", self.name)
            return False
        logger.info("Collection '%s' created.", self.name)
        return True
