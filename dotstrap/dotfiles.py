from pathlib import Path
from typing import Optional

from .commands import command_exists, local_bin, prepend_path, run_command, run_remote_script
from .log import get_logger
from .ui import print_step

CHEZMOI_INSTALL_URL = "https://get.chezmoi.io"


def chezmoi_source_dir(home: Optional[Path] = None) -> Path:
    return (home or Path.home()) / ".local" / "share" / "chezmoi"


def ensure_chezmoi(home: Optional[Path] = None) -> None:
    if command_exists("chezmoi"):
        return
    print_step("Installing chezmoi...")
    bin_dir = local_bin(home)
    bin_dir.mkdir(parents=True, exist_ok=True)
    run_remote_script(CHEZMOI_INSTALL_URL, args=["-b", str(bin_dir)])
    prepend_path(bin_dir)


def setup_chezmoi(repo: str, home: Optional[Path] = None) -> str:
    """
    Apply the dotfiles profile.

    The first run clones and applies the repository; later runs pull and
    re-apply it. Returns "init" or "update" accordingly.
    """
    logger = get_logger()
    ensure_chezmoi(home)

    if not chezmoi_source_dir(home).is_dir():
        print_step(f"Initializing dotfiles from {repo}...")
        run_command(["chezmoi", "init", "--apply", "--verbose", repo])
        logger.info("Dotfiles initialized and applied")
        return "init"

    print_step("Updating existing dotfiles...")
    run_command(["chezmoi", "update", "--verbose"])
    logger.info("Dotfiles updated")
    return "update"
