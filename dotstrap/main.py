#!/usr/bin/env python3
"""
Dotfiles Bootstrap
--------------------------------------------------

Provisions a developer workstation in one unattended pass:
  • Detects the OS and Linux distribution
  • Installs zsh, git, curl and the zsh plugins with the native package manager
  • Installs Starship and chezmoi from their upstream installers
  • Installs the FiraCode Nerd Font and points known terminals at it
  • Makes zsh the login shell
  • Applies (or refreshes) the chezmoi dotfiles profile
  • Optionally schedules a recurring dotfiles refresh in the user's crontab

Stops at the first failing step and exits non-zero.
"""

import atexit
import signal
import sys
import time
from typing import Any, Callable, Optional

import click

from . import APP_NAME, VERSION
from .commands import cleanup_temp_files
from .config import Config
from .cron import register_cron, validate_schedule
from .dotfiles import setup_chezmoi
from .errors import SetupError
from .fonts import install_nerdfont
from .log import get_logger, setup_logger
from .packages import install_dependencies
from .platforms import Platform, detect_platform
from .shell import setup_shell
from .ui import console, create_header, print_completion, print_error, print_section, print_warning


def run_step(description: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    logger = get_logger()
    print_section(description)
    logger.debug(f"Starting: {description}")
    start = time.monotonic()
    try:
        result = func(*args, **kwargs)
    except Exception as e:
        elapsed = time.monotonic() - start
        logger.error(f"✗ Failed: {description} (after {elapsed:.2f}s): {e}")
        raise
    elapsed = time.monotonic() - start
    logger.info(f"✓ Finished: {description} (took {elapsed:.2f}s)")
    return result


def run_setup(config: Config) -> Platform:
    """Run every provisioning step in order. Any exception aborts the run."""
    if config.SETUP_CRON:
        config.CRON_SCHEDULE = validate_schedule(config.CRON_SCHEDULE)

    target = run_step("Detecting platform", detect_platform)
    run_step(
        "Installing system dependencies",
        install_dependencies,
        target,
        with_cron=config.SETUP_CRON,
    )
    if config.INSTALL_NERDFONT:
        run_step("Installing Nerd Font", install_nerdfont, target)
    run_step("Configuring Zsh", setup_shell)
    run_step("Setting up dotfiles with chezmoi", setup_chezmoi, config.REPO_HTTPS)
    if config.SETUP_CRON:
        run_step(
            "Scheduling dotfiles updates",
            register_cron,
            config.CRON_SCHEDULE,
            target,
        )
    return target


def signal_handler(signum: int, frame: Any) -> None:
    sig = signal.Signals(signum).name
    get_logger().error(f"Setup interrupted by {sig}.")
    cleanup_temp_files()
    sys.exit(130 if signum == signal.SIGINT else 143 if signum == signal.SIGTERM else 128 + signum)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=VERSION, prog_name=APP_NAME)
@click.option("--repo", default=None, help="Dotfiles repository to apply (env: REPO_HTTPS).")
@click.option("--log/--no-log", "log_setup", default=None, help="Write a setup transcript (env: LOG_SETUP).")
@click.option("--log-file", default=None, help="Transcript location (env: LOG_FILE).")
@click.option("--font/--no-font", "install_font", default=None, help="Install the Nerd Font (env: INSTALL_NERDFONT).")
@click.option("--cron/--no-cron", "setup_cron", default=None, help="Schedule dotfiles updates (env: SETUP_CRON).")
@click.option("--schedule", default=None, help="Five-field cron schedule (env: CRON_SCHEDULE).")
def main(
    repo: Optional[str],
    log_setup: Optional[bool],
    log_file: Optional[str],
    install_font: Optional[bool],
    setup_cron: Optional[bool],
    schedule: Optional[str],
) -> None:
    """
    Bootstrap this workstation: packages, Nerd Font, zsh and chezmoi dotfiles.

    Settings come from environment variables; options given on the command
    line take precedence.
    """
    try:
        config = Config.from_env()
    except SetupError as e:
        print_error(str(e))
        sys.exit(1)
    if repo is not None:
        config.REPO_HTTPS = repo
    if log_setup is not None:
        config.LOG_SETUP = log_setup
    if log_file is not None:
        config.LOG_FILE = log_file
    if install_font is not None:
        config.INSTALL_NERDFONT = install_font
    if setup_cron is not None:
        config.SETUP_CRON = setup_cron
    if schedule is not None:
        config.CRON_SCHEDULE = schedule

    logger = setup_logger(config.LOG_FILE if config.LOG_SETUP else None)
    signal.signal(signal.SIGTERM, signal_handler)
    atexit.register(cleanup_temp_files)

    console.print(create_header())
    logger.info(f"Starting {APP_NAME} v{VERSION}")

    try:
        run_setup(config)
    except KeyboardInterrupt:
        print_warning("Setup cancelled by user.")
        sys.exit(130)
    except Exception as e:
        logger.debug("Setup aborted", exc_info=True)
        print_error(f"Setup failed: {e}")
        if config.LOG_SETUP:
            print_error(f"See {config.LOG_FILE} for the full transcript.")
        sys.exit(1)

    print_completion()


if __name__ == "__main__":
    main()
