"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class RegisterCommand:
    """Register a new user account."""

    username: str
    password: str
    command: Literal["register"] = "register"


@dataclass(frozen=True)
class LoginCommand:
    """Login with username and password."""

    username: str
    password: str
    command: Literal["login"] = "login"


@dataclass(frozen=True)
class SitesCommand:
    """List the sites of the network."""

    command: Literal["sites"] = "sites"


@dataclass(frozen=True)
class ExpandCommand:
    """Expand or collapse a site section."""

    site_id: int
    command: Literal["expand"] = "expand"


@dataclass(frozen=True)
class ShowCommand:
    """Render a site section again."""

    site_id: int
    command: Literal["show"] = "show"


@dataclass(frozen=True)
class SortCommand:
    """Sort a loaded site by a column."""

    site_id: int
    sort_key: str
    command: Literal["sort"] = "sort"


@dataclass(frozen=True)
class ExportCommand:
    """Save a site's PDF listing as CSV."""

    site_id: int
    output_dir: str | None = None
    command: Literal["export"] = "export"


CommandRequest = (
    RegisterCommand
    | LoginCommand
    | SitesCommand
    | ExpandCommand
    | ShowCommand
    | SortCommand
    | ExportCommand
)
