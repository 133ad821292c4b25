"""REPL with prompt_toolkit for user interaction."""

import os
import sys

from prompt_toolkit import HTML, PromptSession, print_formatted_text
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from common.logging_config import get_logger
from cli.commands import (
    get_client,
    get_controller,
    handle_register,
    handle_login,
    handle_sites,
    handle_expand,
    handle_show,
    handle_sort,
    handle_export,
)
from cli.completer import AuditorCompleter
from cli.constants import (
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.models import (
    RegisterCommand,
    LoginCommand,
    SitesCommand,
    ExpandCommand,
    ShowCommand,
    SortCommand,
    ExportCommand,
)
from cli.parser import ParseError, parse_command

logger = get_logger(__name__)


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome() -> None:
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def print_markup(markup: str) -> None:
    print_formatted_text(HTML(markup), style=STYLE)


async def dispatch_command(cmd_obj) -> str:
    """Dispatch parsed command to appropriate handler."""
    if isinstance(cmd_obj, RegisterCommand):
        return await handle_register(cmd_obj)
    elif isinstance(cmd_obj, LoginCommand):
        return await handle_login(cmd_obj)
    elif isinstance(cmd_obj, SitesCommand):
        return await handle_sites(cmd_obj)
    elif isinstance(cmd_obj, ExpandCommand):
        return await handle_expand(cmd_obj)
    elif isinstance(cmd_obj, ShowCommand):
        return await handle_show(cmd_obj)
    elif isinstance(cmd_obj, SortCommand):
        return await handle_sort(cmd_obj)
    elif isinstance(cmd_obj, ExportCommand):
        return await handle_export(cmd_obj)
    else:
        return f"Unknown command type: {type(cmd_obj).__name__}"


async def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    controller = get_controller()
    controller.on_update = lambda site_id: print_markup(controller.render_site(site_id))

    session: PromptSession = PromptSession(
        completer=AuditorCompleter(), history=InMemoryHistory(), style=STYLE
    )

    clear_screen()
    show_welcome()

    with patch_stdout():
        while True:
            try:
                user_input = await session.prompt_async([("class:prompt", PROMPT_TEXT)])

                if not user_input.strip():
                    continue

                if user_input.strip() == "exit":
                    print("Goodbye!")
                    break

                if user_input.strip() == "help":
                    print(HELP_TEXT)
                    continue

                if user_input.strip() == "clear":
                    clear_screen()
                    show_welcome()
                    continue

                cmd_obj = parse_command(user_input)
                result = await dispatch_command(cmd_obj)
                print_markup(result)

            except ParseError as e:
                print(f"Error: {e}")
            except KeyboardInterrupt:
                continue
            except EOFError:
                print("\nGoodbye!")
                break

    await get_client().close()
