"""
vpsdeploy - UI Components
Standardized headers and summary panels
"""

from rich.console import Console

LOGO = "vpsdeploy"

# Color scheme
BRAND_COLOR = "cyan"
SUCCESS_COLOR = "green"
WARNING_COLOR = "yellow"

PREFIX = f" [bold color(214)]{LOGO}[/bold color(214)] [dim]›[/dim]"


def show_header(
    title: str,
    subtitle: str = None,
    project: str = None,
    details: dict = None,
    console: Console = None,
):
    """
    Display a standardized vpsdeploy command header.

    Args:
        title: Main title (e.g., "Deploy Application")
        subtitle: Optional subtitle line
        project: Project name (if known)
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)

    Example:
        show_header(
            title="Deploy Application",
            details={"Mode": "cleanup"}
        )
    """
    if console is None:
        console = Console()

    console.print(f"{PREFIX} [bold white]{title}[/bold white]")

    if subtitle:
        console.print(f"{PREFIX} [dim]{subtitle}[/dim]")

    if project:
        console.print(f"{PREFIX} Project: [{BRAND_COLOR}]{project}[/{BRAND_COLOR}]")

    if details:
        for key, value in details.items():
            console.print(f"{PREFIX} {key}: [{BRAND_COLOR}]{value}[/{BRAND_COLOR}]")

    console.print()


def show_summary(title: str, rows: dict, console: Console = None, color: str = SUCCESS_COLOR):
    """Display a closing key-value summary block."""
    if console is None:
        console = Console()

    console.print()
    console.print(f"[bold {color}]{title}[/bold {color}]")
    for key, value in rows.items():
        console.print(f"  [dim]{key}:[/dim] {value}")
    console.print()
