"""Main entry point for the location console application."""

import asyncio
import logging
import sys

import aiohttp
from pydantic import ValidationError

from location_console.adapters.config import AppConfig
from location_console.adapters.firebase import FirebaseRealtimeDatastore
from location_console.adapters.memory_location_repository import MemLocationRepository
from location_console.adapters.web import PyViewWebAdapter
from location_console.application.services import LocationAdminService, LocationNormalizer

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


async def main() -> None:
    """Main application entry point."""
    try:
        config = AppConfig()
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level)
    logger.info(
        f"Following '{config.users_path}' at {config.database_url} "
        f"(realtime: {config.realtime_enabled})"
    )

    # Create aiohttp session for efficient HTTP connections
    async with aiohttp.ClientSession() as session:
        datastore = FirebaseRealtimeDatastore.from_config(session, config)
        repository = MemLocationRepository()

        # Initialize services
        normalizer = LocationNormalizer(
            accept_zero_coordinates=config.accept_zero_coordinates,
            history_selection=config.history_selection,
        )
        admin_service = LocationAdminService(datastore, config.users_path, mirror=repository)

        # Initialize display adapter
        display_adapter = PyViewWebAdapter(
            datastore, normalizer, admin_service, repository, config
        )

        try:
            await display_adapter.start()
        except KeyboardInterrupt:
            logger.info("Shutting down...")
        finally:
            await display_adapter.stop()


def run() -> None:
    """Synchronous entry point for the console script."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
