"""Tests for the admin CLI."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from location_console.adapters.config import AppConfig
from location_console.cli import (
    _handle_delete_command,
    _handle_list_command,
    _handle_upsert_command,
    _setup_argparse,
    main,
)
from location_console.domain.models import (
    DatastoreWriteError,
    LocationNotFoundError,
    LocationRecord,
    current_time_ms,
)
from tests.fakes import FakeDatastore

MODULE = "location_console.cli"


class TestArgumentParsing:
    """Tests for the CLI argument parser."""

    def test_upsert_arguments_are_typed(self) -> None:
        """Given upsert arguments, when parsing, then coordinates become floats."""
        args = _setup_argparse().parse_args(
            ["upsert", "alice", "48.137", "11.575", "--accuracy", "12"]
        )

        assert args.command == "upsert"
        assert args.username == "alice"
        assert args.latitude == 48.137
        assert args.longitude == 11.575
        assert args.accuracy == 12.0

    def test_list_json_flag(self) -> None:
        """Given list --json, when parsing, then the json flag is set."""
        args = _setup_argparse().parse_args(["list", "--json"])

        assert args.command == "list"
        assert args.json is True

    def test_negative_coordinates_are_positional(self) -> None:
        """Given negative coordinates, when parsing, then they are read as positionals."""
        args = _setup_argparse().parse_args(["delete", "bob", "-33.86", "151.2"])

        assert args.latitude == -33.86


class TestHandlers:
    """Tests for individual command handlers."""

    @pytest.mark.asyncio
    async def test_list_prints_normalized_users(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Given a users tree, when listing, then users are printed with presence."""
        datastore = FakeDatastore(
            {
                "users": {
                    "k1": {
                        "location": {
                            "username": "alice",
                            "latitude": 1.0,
                            "longitude": 2.0,
                            "timestamp": current_time_ms(),
                        }
                    },
                    "k2": {"location": {"username": "ghost"}},
                }
            }
        )

        await _handle_list_command(datastore, AppConfig.for_testing(), as_json=False)  # type: ignore[arg-type]

        out = capsys.readouterr().out
        assert "1 user(s), 1 online:" in out
        assert "alice" in out
        assert "ghost" not in out

    @pytest.mark.asyncio
    async def test_list_empty(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Given an empty datastore, when listing, then a message is printed."""
        await _handle_list_command(FakeDatastore(), AppConfig.for_testing(), as_json=False)  # type: ignore[arg-type]

        assert "No users found." in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_upsert_builds_update(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Given parsed arguments, when upserting, then the service receives a LocationUpdate."""
        service = MagicMock()
        service.upsert = AsyncMock(
            return_value=LocationRecord(username="alice", latitude=1.0, longitude=2.0)
        )
        args = SimpleNamespace(username="alice", latitude=1.0, longitude=2.0, accuracy=None)

        await _handle_upsert_command(service, args)

        update = service.upsert.call_args.args[0]
        assert (update.username, update.latitude, update.longitude) == ("alice", 1.0, 2.0)
        assert "Updated location for alice" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_delete_reports_key(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Given a matching entry, when deleting, then the removed key is printed."""
        service = MagicMock()
        service.delete_matching = AsyncMock(return_value="k1")
        args = SimpleNamespace(username="alice", latitude=1.0, longitude=2.0)

        await _handle_delete_command(service, args)

        assert "(key: k1)" in capsys.readouterr().out


class TestMain:
    """Tests for the CLI entry point."""

    @pytest.mark.asyncio
    async def test_no_command_prints_help_and_exits(self) -> None:
        """Given no command, when running, then help is shown and the exit code is 1."""
        with pytest.raises(SystemExit) as exc_info:
            await main([])

        assert exc_info.value.code == 1

    @pytest.mark.asyncio
    async def test_domain_errors_exit_with_message(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Given a missing entry, when deleting, then the error is printed and the exit code is 1."""
        with (
            patch(f"{MODULE}.AppConfig", return_value=AppConfig.for_testing()),
            patch(
                f"{MODULE}._execute_command",
                new=AsyncMock(side_effect=LocationNotFoundError("alice", 1.0, 2.0)),
            ),
            pytest.raises(SystemExit) as exc_info,
        ):
            await main(["delete", "alice", "1.0", "2.0"])

        assert exc_info.value.code == 1
        assert "Error: Could not find location for 'alice'" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_write_errors_exit_with_message(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Given a rejected write, when seeding, then the error is printed."""
        with (
            patch(f"{MODULE}.AppConfig", return_value=AppConfig.for_testing()),
            patch(
                f"{MODULE}._execute_command",
                new=AsyncMock(side_effect=DatastoreWriteError("permission denied", 401)),
            ),
            pytest.raises(SystemExit),
        ):
            await main(["seed"])

        assert "Error: permission denied" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_successful_command_passes_config(self) -> None:
        """Given a valid command, when running, then it executes with the loaded config."""
        config = AppConfig.for_testing()
        execute = AsyncMock()
        with (
            patch(f"{MODULE}.AppConfig", return_value=config),
            patch(f"{MODULE}._execute_command", new=execute),
        ):
            await main(["clear"])

        args, passed_config = execute.call_args.args
        assert args.command == "clear"
        assert passed_config is config
