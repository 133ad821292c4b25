"""Command parser for CLI input."""

import shlex

from cli.constants import SORT_COLUMNS
from cli.models import (
    CommandRequest,
    RegisterCommand,
    LoginCommand,
    SitesCommand,
    ExpandCommand,
    ShowCommand,
    SortCommand,
    ExportCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Register/Login/Sites/Expand/Show/Sort/Export)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]

    if command_name == "register":
        return _parse_register(tokens[1:])
    elif command_name == "login":
        return _parse_login(tokens[1:])
    elif command_name == "sites":
        return _parse_sites(tokens[1:])
    elif command_name == "expand":
        return ExpandCommand(site_id=_parse_site_arg("expand", tokens[1:]))
    elif command_name == "show":
        return ShowCommand(site_id=_parse_site_arg("show", tokens[1:]))
    elif command_name == "sort":
        return _parse_sort(tokens[1:])
    elif command_name == "export":
        return _parse_export(tokens[1:])
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_site_id(value: str) -> int:
    """Parse a positive integer site id."""
    try:
        site_id = int(value)
    except ValueError:
        raise ParseError(f"Invalid site ID: {value}")

    if site_id <= 0:
        raise ParseError(f"Invalid site ID: {value}")
    return site_id


def _parse_site_arg(command_name: str, args: list[str]) -> int:
    """Parse '<command> <site_id>'."""
    if len(args) != 1:
        raise ParseError(f"{command_name} requires exactly 1 argument: <site_id>")
    return _parse_site_id(args[0])


def _parse_register(args: list[str]) -> RegisterCommand:
    """Parse 'register <username> <password>' command."""
    if len(args) != 2:
        raise ParseError("register requires exactly 2 arguments: <username> <password>")

    username, password = args
    return RegisterCommand(username=username, password=password)


def _parse_login(args: list[str]) -> LoginCommand:
    """Parse 'login <username> <password>' command."""
    if len(args) != 2:
        raise ParseError("login requires exactly 2 arguments: <username> <password>")

    username, password = args
    return LoginCommand(username=username, password=password)


def _parse_sites(args: list[str]) -> SitesCommand:
    """Parse 'sites' command."""
    if args:
        raise ParseError("sites takes no arguments")
    return SitesCommand()


def _parse_sort(args: list[str]) -> SortCommand:
    """Parse 'sort <site_id> <filename|date|size>' command."""
    if len(args) != 2:
        raise ParseError("sort requires exactly 2 arguments: <site_id> <filename|date|size>")

    site_id = _parse_site_id(args[0])
    column = args[1].lower()
    if column not in SORT_COLUMNS:
        raise ParseError(f"Unknown sort column: {args[1]} (use filename, date or size)")

    return SortCommand(site_id=site_id, sort_key=SORT_COLUMNS[column])


def _parse_export(args: list[str]) -> ExportCommand:
    """Parse 'export <site_id> [output_dir]' command."""
    if len(args) < 1 or len(args) > 2:
        raise ParseError("export requires 1 or 2 arguments: <site_id> [output_dir]")

    site_id = _parse_site_id(args[0])
    output_dir = args[1] if len(args) > 1 else None

    return ExportCommand(site_id=site_id, output_dir=output_dir)
