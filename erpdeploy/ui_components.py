"""
erpdeploy - UI Components
Standardized headers and colors
"""

from rich.console import Console

LOGO = "erpdeploy"

BRAND_COLOR = "cyan"


def show_header(
    title: str,
    subtitle: str = None,
    details: dict = None,
    console: Console = None,
):
    """
    Display a standardized erpdeploy command header.

    Args:
        title: Main title (e.g., "Install ERPNext")
        subtitle: Optional subtitle line
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)

    Example:
        show_header(
            title="Install ERPNext",
            details={"Site": "erp.local", "Bench": "/opt/erpnext/erpnext-bench"}
        )
    """
    if console is None:
        console = Console()

    prefix = f" [bold color(214)]{LOGO}[/bold color(214)] [dim]›[/dim]"

    console.print(f"{prefix} [bold white]{title}[/bold white]")

    if subtitle:
        console.print(f"{prefix} [dim]{subtitle}[/dim]")

    if details:
        for key, value in details.items():
            console.print(f"{prefix} {key}: [{BRAND_COLOR}]{value}[/{BRAND_COLOR}]")

    console.print()
