"""Provision the questions collection without starting the API.

Uses the same settings and retry policy as the service. Run:
	python scripts/ensure_index.py

Environment:
	TYPESENSE_URI      (or services__typesense__typesense__0)
	TYPESENSE_API_KEY  (or typesense-api-key)
	RETRY_POLICY_PATH  (optional YAML with a 'retry' section)
"""

from __future__ import annotations

import asyncio
import logging

from question_search.config import ConfigurationError, load_retry_policy, load_settings
from question_search.index import CollectionManager, TypesenseError, get_typesense_client


LOG_LEVEL: str = "INFO"


async def ensure_index() -> bool:
	"""Create the collection if missing; True when this run created it."""
	settings = load_settings()
	async with get_typesense_client(settings, load_retry_policy()) as client:
		manager = CollectionManager(client, name=settings.collection_name)
		return await manager.ensure_collection()


def main() -> int:
	logging.basicConfig(
		level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
		format="%(asctime)s %(levelname)s %(name)s - %(message)s",
	)
	logger = logging.getLogger(__name__)
	try:
		created = asyncio.run(ensure_index())
	except ConfigurationError as e:
		logger.error("Configuration error: %s", e)
		return 1
	except TypesenseError as e:
		logger.error("Index provisioning failed: %s", e.message)
		return 1
	logger.info("Collection %s.", "created" if created else "already present")
	return 0


if __name__ == "__main__":  # pragma: no cover
	raise SystemExit(main())
