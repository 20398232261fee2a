"""Admin CLI for the location datastore."""

import asyncio
import json
import sys
from typing import Any

import aiohttp
from pydantic import ValidationError

from location_console.adapters.config import AppConfig
from location_console.adapters.firebase import FirebaseRealtimeDatastore
from location_console.application.services import LocationAdminService, LocationNormalizer
from location_console.domain.models import (
    LocationConsoleError,
    LocationRecord,
    LocationUpdate,
    current_time_ms,
)


def _format_record(record: LocationRecord, now_ms: int) -> str:
    status = "online " if record.is_online(now_ms) else "offline"
    accuracy = f" ±{record.accuracy:g}m" if record.accuracy is not None else ""
    return (
        f"{status}  {record.username:<20} "
        f"{record.latitude:.4f}, {record.longitude:.4f}{accuracy}"
    )


async def _handle_list_command(
    datastore: FirebaseRealtimeDatastore, config: AppConfig, as_json: bool
) -> None:
    """Handle the list command."""
    normalizer = LocationNormalizer(
        accept_zero_coordinates=config.accept_zero_coordinates,
        history_selection=config.history_selection,
    )
    now_ms = current_time_ms()
    records = normalizer.normalize_snapshot(await datastore.read(config.users_path), now_ms)

    if as_json:
        print(json.dumps([record.to_view(now_ms) for record in records], indent=2))
        return

    if not records:
        print("No users found.")
        return
    online = sum(1 for record in records if record.is_online(now_ms))
    print(f"{len(records)} user(s), {online} online:")
    for record in records:
        print(f"  {_format_record(record, now_ms)}")


async def _handle_upsert_command(service: LocationAdminService, args: Any) -> None:
    """Handle the upsert command."""
    update = LocationUpdate(
        username=args.username,
        latitude=args.latitude,
        longitude=args.longitude,
        accuracy=args.accuracy,
    )
    record = await service.upsert(update)
    print(f"Updated location for {record.username}")


async def _handle_delete_command(service: LocationAdminService, args: Any) -> None:
    """Handle the delete command."""
    target = LocationRecord(username=args.username, latitude=args.latitude, longitude=args.longitude)
    external_key = await service.delete_matching(target)
    print(f"Removed {args.username} from the database (key: {external_key})")


def _setup_argparse() -> Any:
    """Set up and configure argument parser."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Location Console datastore admin",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List users with presence
  location-console-admin list

  # Write the demo users
  location-console-admin seed

  # Upsert a location
  location-console-admin upsert alice 48.137 11.575 --accuracy 12

  # Delete the entry holding exactly this location
  location-console-admin delete alice 48.137 11.575

Datastore settings are read from the environment or .env (FIREBASE_DATABASE_URL, ...).
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    list_parser = subparsers.add_parser("list", help="List normalized user locations")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    subparsers.add_parser("seed", help="Add the demo test users")
    subparsers.add_parser("clear", help="Remove all users from the datastore")

    upsert_parser = subparsers.add_parser("upsert", help="Write a user's location")
    upsert_parser.add_argument("username", help="Username (also used as the datastore key)")
    upsert_parser.add_argument("latitude", type=float, help="Latitude in degrees")
    upsert_parser.add_argument("longitude", type=float, help="Longitude in degrees")
    upsert_parser.add_argument("--accuracy", type=float, default=None, help="Accuracy in meters")

    delete_parser = subparsers.add_parser(
        "delete", help="Delete the user entry matching username and coordinates"
    )
    delete_parser.add_argument("username", help="Username stored in the location")
    delete_parser.add_argument("latitude", type=float, help="Latitude in degrees")
    delete_parser.add_argument("longitude", type=float, help="Longitude in degrees")

    return parser


async def _execute_command(args: Any, config: AppConfig) -> None:
    """Execute the appropriate command based on args."""
    async with aiohttp.ClientSession() as session:
        datastore = FirebaseRealtimeDatastore.from_config(session, config)
        service = LocationAdminService(datastore, config.users_path)

        if args.command == "list":
            await _handle_list_command(datastore, config, args.json)
        elif args.command == "seed":
            keys = await service.seed_test_data()
            print(f"Added {len(keys)} test users: {', '.join(keys)}")
        elif args.command == "clear":
            await service.clear_all()
            print("Cleared all location data")
        elif args.command == "upsert":
            await _handle_upsert_command(service, args)
        elif args.command == "delete":
            await _handle_delete_command(service, args)
        else:
            raise ValueError(f"Unknown command: {args.command}")


async def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _setup_argparse()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        await _execute_command(args, AppConfig())
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(1)
    except (LocationConsoleError, ValidationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
