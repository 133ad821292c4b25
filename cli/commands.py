"""Command handler functions for CLI operations."""

from html import escape
from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.models import (
    RegisterCommand,
    LoginCommand,
    SitesCommand,
    ExpandCommand,
    ShowCommand,
    SortCommand,
    ExportCommand,
)
from cli.config import Config
from cli.auditor_client import AuditorClient, AuditorRequestError
from cli.table_controller import COLUMN_LABELS, TableController

logger = get_logger(__name__)


CONFIG_PATH = Path.home() / '.pdf-auditor' / 'config.json'

_config: Optional[Config] = None
_client: Optional[AuditorClient] = None
_controller: Optional[TableController] = None


def get_config() -> Config:
    global _config
    if _config is None:
        _config = Config(CONFIG_PATH)
    return _config


def get_client() -> AuditorClient:
    """
    Get or create global AuditorClient instance.

    Returns:
        AuditorClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new AuditorClient instance")
        _client = AuditorClient(get_config())
    return _client


def get_controller() -> TableController:
    """
    Get or create the session's TableController.

    Returns:
        TableController instance
    """
    global _controller
    if _controller is None:
        _controller = TableController(get_client())
    return _controller


async def handle_register(cmd: RegisterCommand, client: Optional[AuditorClient] = None) -> str:
    """
    Handle 'register' command.

    Args:
        cmd: RegisterCommand with username and password
        client: Optional AuditorClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    if client is None:
        client = get_client()
    return escape(await client.register(cmd.username, cmd.password))


async def handle_login(cmd: LoginCommand, client: Optional[AuditorClient] = None) -> str:
    """
    Handle 'login' command.

    Args:
        cmd: LoginCommand with username and password
        client: Optional AuditorClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    if client is None:
        client = get_client()
    return escape(await client.login(cmd.username, cmd.password))


async def handle_sites(
    cmd: SitesCommand,
    client: Optional[AuditorClient] = None,
    controller: Optional[TableController] = None
) -> str:
    """
    Handle 'sites' command.

    Args:
        cmd: SitesCommand
        client: Optional AuditorClient for dependency injection (testing)
        controller: Optional TableController for dependency injection (testing)

    Returns:
        Site directory or error message
    """
    if client is None:
        client = get_client()
    if controller is None:
        controller = get_controller()

    try:
        sites = await client.list_sites()
    except AuditorRequestError as e:
        return f"<error>{escape(str(e))}</error>"

    controller.remember_sites(sites)

    if not sites:
        return "No sites found."

    lines = [f"<b>{len(sites)} site(s):</b>"]
    for site in sites:
        lines.append(
            f"  {site.site_id:>4}  {escape(site.blogname)}  <muted>{escape(site.domain + site.path)}</muted>"
        )
    return "\n".join(lines)


async def handle_expand(cmd: ExpandCommand, controller: Optional[TableController] = None) -> str:
    """
    Handle 'expand' command.

    The first expand starts loading the site in the background; its table
    is printed when the fetch settles.

    Args:
        cmd: ExpandCommand with site_id
        controller: Optional TableController for dependency injection (testing)

    Returns:
        The site's section as it looks right now
    """
    if controller is None:
        controller = get_controller()
    controller.toggle_site(cmd.site_id)
    return controller.render_site(cmd.site_id)


async def handle_show(cmd: ShowCommand, controller: Optional[TableController] = None) -> str:
    """
    Handle 'show' command.

    Args:
        cmd: ShowCommand with site_id
        controller: Optional TableController for dependency injection (testing)

    Returns:
        The site's section
    """
    if controller is None:
        controller = get_controller()
    return controller.render_site(cmd.site_id)


async def handle_sort(cmd: SortCommand, controller: Optional[TableController] = None) -> str:
    """
    Handle 'sort' command.

    Args:
        cmd: SortCommand with site_id and sort_key
        controller: Optional TableController for dependency injection (testing)

    Returns:
        The re-sorted section, or a hint when the site has nothing to sort
    """
    if controller is None:
        controller = get_controller()

    state = controller.handle_sort(cmd.site_id, cmd.sort_key)
    if state is None:
        return f"Nothing to sort for site {cmd.site_id}. Run: expand {cmd.site_id}"

    logger.debug(f"Sort by {COLUMN_LABELS[cmd.sort_key]} [site_id={cmd.site_id}]")
    return controller.render_site(cmd.site_id)


async def handle_export(
    cmd: ExportCommand,
    controller: Optional[TableController] = None,
    config: Optional[Config] = None
) -> str:
    """
    Handle 'export' command.

    Args:
        cmd: ExportCommand with site_id and optional output_dir
        controller: Optional TableController for dependency injection (testing)
        config: Optional Config for dependency injection (testing)

    Returns:
        Saved file path or error message
    """
    logger.info(f"Executing export command: site_id={cmd.site_id} output_dir={cmd.output_dir}")
    if controller is None:
        controller = get_controller()
    if config is None:
        config = get_config()

    output_dir = Path(cmd.output_dir) if cmd.output_dir else config.get_downloads_dir()
    return escape(await controller.export_site(cmd.site_id, output_dir))
