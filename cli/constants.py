"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["register", "login", "sites", "expand", "show", "sort", "export", "clear", "exit", "help"]

SORT_COLUMNS = {
    "filename": "filename",
    "date": "upload_date",
    "size": "file_size_raw",
}

STYLE = Style.from_dict(
    {
        "prompt": "#2271b1 bold",
        "command": "#0088ff bold",
        "header": "bold",
        "error": "#d63638",
        "muted": "#8c8f94",
    }
)

BLUE = "\033[38;2;34;113;177m"
RESET = "\033[0m"

LOGO = f"""{BLUE}
 ██████╗ ██████╗ ███████╗     █████╗ ██╗   ██╗██████╗ ██╗████████╗ ██████╗ ██████╗
 ██╔══██╗██╔══██╗██╔════╝    ██╔══██╗██║   ██║██╔══██╗██║╚══██╔══╝██╔═══██╗██╔══██╗
 ██████╔╝██║  ██║█████╗      ███████║██║   ██║██║  ██║██║   ██║   ██║   ██║██████╔╝
 ██╔═══╝ ██║  ██║██╔══╝      ██╔══██║██║   ██║██║  ██║██║   ██║   ██║   ██║██╔══██╗
 ██║     ██████╔╝██║         ██║  ██║╚██████╔╝██████╔╝██║   ██║   ╚██████╔╝██║  ██║
 ╚═╝     ╚═════╝ ╚═╝         ╚═╝  ╚═╝ ╚═════╝ ╚═════╝ ╚═╝   ╚═╝    ╚═════╝ ╚═╝  ╚═╝
{RESET}"""

WELCOME_TITLE = "PDF Auditor - Network-wide PDF inventory"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "pdf-auditor> "

HELP_TEXT = """Available commands:
  register <username> <password>      Register new user account
  login <username> <password>         Login and get API key
  sites                               List the sites of the network
  expand <site_id>                    Expand or collapse a site (loads its PDFs on first expand)
  show <site_id>                      Show a site's section again
  sort <site_id> <column>             Sort a loaded site by filename, date or size
  export <site_id> [output_dir]       Save a site's PDF listing as CSV (defaults to downloads dir)
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Sorting the same column twice flips between ascending and descending.
Examples:
  login admin mypassword123
  sites
  expand 2
  sort 2 size
  export 2 reports/"""

STRINGS = {
    "loading_pdfs": "Loading PDFs...",
    "no_pdfs": "No PDFs found in this site.",
    "download_csv": "Download CSV for this site",
    "downloading": "Generating...",
    "error_loading": "Error loading PDFs",
    "error_generating": "Error generating CSV",
    "network_error": "Network error. Please check your connection and try again.",
    "invalid_response": "Invalid response from server. Please try again.",
    "permission_denied": "You do not have permission to perform this action.",
    "not_logged_in": "Not logged in. Please run: login <username> <password>",
}
