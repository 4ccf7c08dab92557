"""Rich panels for plugin errors and plugin usage."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rich.panel import Panel

    from plugopt.exceptions import PlugoptError


def _panel(body: str, title: str, style: str) -> "Panel":
    from rich import box
    from rich.panel import Panel
    from rich.text import Text

    return Panel(
        Text(body, "default"),
        title=title,
        style=style,
        box=box.ROUNDED,
        expand=True,
        title_align="left",
    )


def error_title(error: "PlugoptError") -> str:
    """``"Error: <flag>"`` naming the failing plugin, or else the failing option."""
    if error.plugin:
        return f"Error: {error.plugin}"
    if error.option is not None:
        return f"Error: {error.flag}"
    return "Error"


def error_panel(error: "PlugoptError") -> "Panel":
    """Red panel describing a binding error.

    The plugin flag moves from the message into the title:

    .. code-block:: text

        ╭─ Error: -Xrename ──────────────────────────────────────────╮
        │ Required option "-suffix" not provided for "RenamePlugin". │
        ╰────────────────────────────────────────────────────────────╯
    """
    return _panel(error.detail, error_title(error), "red")


def usage_panel(flag: str, usage: str) -> "Panel":
    """Borderless-style panel holding a plugin's rendered usage, titled with its flag."""
    return _panel(usage, flag, "none")
