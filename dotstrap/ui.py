"""
Console helpers shared by every setup step.

All output goes through one rich Console so that logging, streamed command
output and status messages interleave cleanly.
"""

import logging
from typing import Optional

import pyfiglet
from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

from . import APP_NAME, VERSION


# ----------------------------------------------------------------
# Nord-Themed Colors
# ----------------------------------------------------------------
class NordColors:
    POLAR_NIGHT_3: str = "#434C5E"
    SNOW_STORM_1: str = "#D8DEE9"
    SNOW_STORM_2: str = "#E5E9F0"
    FROST_1: str = "#8FBCBB"
    FROST_2: str = "#88C0D0"
    FROST_3: str = "#81A1C1"
    FROST_4: str = "#5E81AC"
    RED: str = "#BF616A"
    YELLOW: str = "#EBCB8B"
    GREEN: str = "#A3BE8C"


nord_theme = Theme(
    {
        "banner": f"bold {NordColors.FROST_2}",
        "header": f"bold {NordColors.FROST_2}",
        "info": NordColors.GREEN,
        "warning": NordColors.YELLOW,
        "error": NordColors.RED,
        "debug": NordColors.POLAR_NIGHT_3,
        "success": NordColors.GREEN,
    }
)

console = Console(theme=nord_theme, highlight=False)

# Child of the "dotstrap" logger: records reach the transcript file only,
# since the console handler sits at INFO.
transcript = logging.getLogger("dotstrap.console")


def create_header(title: str = APP_NAME) -> Panel:
    """
    Render the start-up banner.

    The figlet art is built line by line into a Text object so that
    characters such as '[' in the art are never read as markup.
    """
    ascii_art = ""
    for font in ("slant", "small", "standard"):
        try:
            ascii_art = pyfiglet.Figlet(font=font, width=80).renderText(title)
            if ascii_art.strip():
                break
        except pyfiglet.FontNotFound:
            continue
    lines = [line for line in ascii_art.splitlines() if line.strip()] or [title]
    colors = [
        NordColors.FROST_1,
        NordColors.FROST_2,
        NordColors.FROST_3,
        NordColors.FROST_4,
    ]
    art = Text()
    for i, line in enumerate(lines):
        art.append(line, style=f"bold {colors[i % len(colors)]}")
        if i < len(lines) - 1:
            art.append("\n")
    return Panel(
        Align.center(art),
        border_style=NordColors.FROST_1,
        padding=(1, 2),
        title=Text(f"v{VERSION}", style=f"bold {NordColors.SNOW_STORM_2}"),
        title_align="right",
        subtitle=Text("Workstation Setup", style=f"bold {NordColors.SNOW_STORM_1}"),
        subtitle_align="center",
    )


def print_message(text: str, style: str = NordColors.FROST_2, prefix: str = "•") -> None:
    console.print(f"[{style}]{prefix} {escape(text)}[/{style}]")
    transcript.debug(f"{prefix} {text}")


def print_section(title: str) -> None:
    console.print()
    console.print(f"[bold {NordColors.FROST_2}]{title}[/]")
    console.print(f"[{NordColors.FROST_3}]{'─' * len(title)}[/]")
    transcript.debug(f"== {title} ==")


def print_step(message: str) -> None:
    print_message(message, NordColors.FROST_2, "→")


def print_success(message: str) -> None:
    print_message(message, NordColors.GREEN, "✓")


def print_warning(message: str) -> None:
    print_message(message, NordColors.YELLOW, "⚠")


def print_error(message: str) -> None:
    print_message(message, NordColors.RED, "✗")


def display_panel(message: str, style: str = NordColors.FROST_2, title: Optional[str] = None) -> None:
    console.print(
        Panel(
            Text.from_markup(f"[{style}]{message}[/{style}]"),
            border_style=style,
            padding=(1, 2),
            title=f"[bold {style}]{title}[/]" if title else None,
        )
    )
    transcript.debug(Text.from_markup(message).plain)


def print_completion() -> None:
    display_panel(
        "Setup complete!\n\n"
        f"[bold {NordColors.SNOW_STORM_1}]Restart your terminal or run:[/]\n"
        f"  [{NordColors.YELLOW}]exec zsh[/]",
        NordColors.GREEN,
        title="Done",
    )
