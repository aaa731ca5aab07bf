"""
Nerd Font installation.

Linux downloads the release archive into the user font directory and then
points the terminals it can find at the font. macOS uses the Homebrew cask.
"""

import os
import shutil
import zipfile
from pathlib import Path
from typing import List, Optional

from .commands import backup_file, command_exists, download_file, make_temp_path, run_command
from .log import get_logger
from .platforms import Platform
from .ui import print_step, print_success

FONT = "FiraCode"
FONT_VERSION = "v3.1.1"
FONT_URL = f"https://github.com/ryanoasis/nerd-fonts/releases/download/{FONT_VERSION}/{FONT}.zip"
NERD_FONT_NAME = "FiraCode Nerd Font Mono"
FONT_SIZE = 12
REGULAR_TTF = f"{FONT}NerdFont-Regular.ttf"
MACOS_CASK = "font-fira-code-nerd-font"

GNOME_TERMINAL_DIR = Path("/usr/share/gnome-terminal")
CONSOLE_FONTS_DIR = Path("/usr/share/consolefonts")


def font_dir(home: Optional[Path] = None) -> Path:
    return (home or Path.home()) / ".local" / "share" / "fonts"


def install_font_files(home: Optional[Path] = None) -> bool:
    """Download and extract the font unless it is already installed."""
    target = font_dir(home)
    if (target / REGULAR_TTF).is_file():
        get_logger().info(f"{FONT} Nerd Font already present in {target}")
        return False

    print_step(f"Downloading {FONT} Nerd Font...")
    target.mkdir(parents=True, exist_ok=True)
    archive = make_temp_path(suffix=".zip")
    try:
        download_file(FONT_URL, archive)
        with zipfile.ZipFile(archive) as zf:
            zf.extractall(target)
    finally:
        archive.unlink(missing_ok=True)
    run_command(["fc-cache", "-f", str(target)])
    return True


def configure_gnome_terminal() -> bool:
    if not (command_exists("gsettings") and GNOME_TERMINAL_DIR.is_dir()):
        return False
    print_step("Configuring GNOME Terminal...")
    result = run_command(
        ["gsettings", "get", "org.gnome.Terminal.ProfilesList", "default"],
        capture_output=True,
    )
    profile = result.stdout.strip().strip("'")
    schema = (
        "org.gnome.Terminal.Legacy.Profile:"
        f"/org/gnome/terminal/legacy/profiles:/:{profile}/"
    )
    run_command(["gsettings", "set", schema, "font", f"{NERD_FONT_NAME} {FONT_SIZE}"])
    return True


def patch_alacritty(config: Path) -> bool:
    """Append a font.normal block to alacritty.yml. Returns True if the file changed."""
    if not config.is_file():
        return False
    content = config.read_text(encoding="utf-8")
    if f"family: {NERD_FONT_NAME}" in content:
        return False
    print_step("Configuring Alacritty...")
    backup_file(config)
    with open(config, "a", encoding="utf-8") as f:
        f.write(f"\nfont:\n  normal:\n    family: {NERD_FONT_NAME}\n    style: Regular\n")
    return True


def patch_kitty(config: Path) -> bool:
    if not config.is_file():
        return False
    content = config.read_text(encoding="utf-8")
    directive = f"font_family {NERD_FONT_NAME}"
    if directive in content:
        return False
    print_step("Configuring Kitty...")
    with open(config, "a", encoding="utf-8") as f:
        if content and not content.endswith("\n"):
            f.write("\n")
        f.write(directive + "\n")
    return True


def configure_console_font(home: Optional[Path] = None) -> bool:
    # Writing to /usr/share/consolefonts needs root.
    if not (CONSOLE_FONTS_DIR.is_dir() and os.geteuid() == 0):
        return False
    print_step("Configuring console fonts...")
    shutil.copy2(font_dir(home) / REGULAR_TTF, CONSOLE_FONTS_DIR)
    run_command(["setupcon", "--save-only", "--force"])
    return True


def configure_terminals(home: Optional[Path] = None) -> List[str]:
    """Point every detected terminal at the Nerd Font. Returns the ones touched."""
    home = home or Path.home()
    configured = []
    if configure_gnome_terminal():
        configured.append("gnome-terminal")
    if patch_alacritty(home / ".config" / "alacritty" / "alacritty.yml"):
        configured.append("alacritty")
    if patch_kitty(home / ".config" / "kitty" / "kitty.conf"):
        configured.append("kitty")
    if configure_console_font(home):
        configured.append("console")
    return configured


def install_macos_font(home: Optional[Path] = None) -> bool:
    fonts = (home or Path.home()) / "Library" / "Fonts"
    if any(fonts.glob(f"{FONT}NerdFont*")):
        get_logger().info(f"{FONT} Nerd Font already present in {fonts}")
        return False
    print_step(f"Installing {MACOS_CASK}...")
    run_command(["brew", "install", "--cask", MACOS_CASK])
    return True


def install_nerdfont(target: Platform, home: Optional[Path] = None) -> None:
    logger = get_logger()
    if target is Platform.MACOS:
        install_macos_font(home)
        print_success(f"{NERD_FONT_NAME} installed. Select it in your terminal preferences.")
        return

    install_font_files(home)
    configured = configure_terminals(home)
    if configured:
        logger.info(f"Configured terminals: {', '.join(configured)}")
    else:
        logger.info("No known terminal configuration found to update")
    print_success("Font configuration attempted. Changes may require terminal restart.")
