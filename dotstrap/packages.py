import os
from pathlib import Path
from typing import List, Optional

from .commands import command_exists, local_bin, prepend_path, run_command, run_remote_script
from .log import get_logger
from .platforms import Platform
from .ui import print_step

HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
STARSHIP_INSTALL_URL = "https://starship.rs/install.sh"
HOMEBREW_PREFIXES = (Path("/opt/homebrew/bin"), Path("/usr/local/bin"))

BASE_PACKAGES: List[str] = [
    "zsh",
    "git",
    "curl",
    "zsh-syntax-highlighting",
    "zsh-autosuggestions",
]

CRON_PACKAGES = {
    Platform.DEBIAN: "cron",
    Platform.FEDORA: "cronie",
    Platform.ARCH: "cronie",
}


def package_list(target: Platform, with_cron: bool = False) -> List[str]:
    """Packages to install through the native package manager."""
    if target is Platform.MACOS:
        return BASE_PACKAGES + ["starship"]
    packages = BASE_PACKAGES + ["fontconfig"]
    if with_cron:
        packages.append(CRON_PACKAGES[target])
    return packages


def install_commands(target: Platform, packages: List[str]) -> List[List[str]]:
    """The package-manager invocations for a platform, in the order they run."""
    if target is Platform.DEBIAN:
        apt = ["sudo", "env", "DEBIAN_FRONTEND=noninteractive", "apt"]
        return [apt + ["update", "-y"], apt + ["install", "-y"] + packages]
    if target is Platform.FEDORA:
        return [["sudo", "dnf", "install", "-y"] + packages]
    if target is Platform.ARCH:
        return [["sudo", "pacman", "-Sy", "--noconfirm"] + packages]
    return [["brew", "install"] + packages]


def ensure_homebrew() -> None:
    if command_exists("brew"):
        return
    print_step("Installing Homebrew...")
    run_remote_script(HOMEBREW_INSTALL_URL, shell="/bin/bash", env={"NONINTERACTIVE": "1"})
    for prefix in HOMEBREW_PREFIXES:
        if (prefix / "brew").exists():
            prepend_path(prefix)
            break


def ensure_starship(home: Optional[Path] = None) -> None:
    if command_exists("starship"):
        return
    print_step("Installing Starship...")
    bin_dir = local_bin(home)
    bin_dir.mkdir(parents=True, exist_ok=True)
    run_remote_script(STARSHIP_INSTALL_URL, args=["--yes", "--bin-dir", str(bin_dir)])
    prepend_path(bin_dir)


def install_dependencies(target: Platform, with_cron: bool = False, home: Optional[Path] = None) -> None:
    logger = get_logger()
    logger.info("Installing system dependencies...")

    if target is Platform.MACOS:
        ensure_homebrew()

    packages = package_list(target, with_cron)
    for cmd in install_commands(target, packages):
        run_command(cmd)
    logger.info(f"Installed packages: {' '.join(packages)}")

    if target.is_linux:
        ensure_starship(home)
    logger.debug(f"PATH is now {os.environ.get('PATH', '')}")
