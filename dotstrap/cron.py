"""
Recurring dotfiles refresh through the user's crontab.

A small wrapper script runs `chezmoi update`, and one crontab line runs
the wrapper on the configured schedule. Re-running never duplicates the line.
"""

import re
import shlex
from pathlib import Path
from typing import Optional

from .commands import command_exists, local_bin, run_command
from .errors import SetupError
from .log import get_logger
from .platforms import Platform
from .ui import print_step

# Five whitespace-separated fields made of digits, '*', '/', ',' and '-'.
CRON_SCHEDULE_PATTERN = re.compile(r"^\s*[0-9*/,\-]+(\s+[0-9*/,\-]+){4}\s*$")

UPDATE_SCRIPT_NAME = "dotfiles-update"

CRON_SERVICES = {
    Platform.DEBIAN: "cron",
    Platform.FEDORA: "crond",
    Platform.ARCH: "cronie",
}

UPDATE_SCRIPT_TEMPLATE = """#!/bin/sh
# Refresh dotfiles from the chezmoi source repository.
BIN_DIR={bin_dir}
LOG_DIR={log_dir}
LOG_FILE={log_file}
export PATH="$BIN_DIR:/opt/homebrew/bin:/usr/local/bin:$PATH"
mkdir -p "$LOG_DIR"
echo "$(date): updating dotfiles" >> "$LOG_FILE"
chezmoi update --force >> "$LOG_FILE" 2>&1
"""


def validate_schedule(schedule: str) -> str:
    """Return the schedule with normalized spacing, or raise SetupError."""
    if not schedule or not CRON_SCHEDULE_PATTERN.match(schedule):
        raise SetupError(
            f"Invalid cron schedule: {schedule!r} (expected five fields, e.g. '0 12 * * *')"
        )
    return " ".join(schedule.split())


def update_script_path(home: Optional[Path] = None) -> Path:
    return local_bin(home) / UPDATE_SCRIPT_NAME


def render_update_script(home: Optional[Path] = None) -> str:
    home = home or Path.home()
    log_dir = home / ".local" / "state" / "dotstrap"
    return UPDATE_SCRIPT_TEMPLATE.format(
        bin_dir=shlex.quote(str(local_bin(home))),
        log_dir=shlex.quote(str(log_dir)),
        log_file=shlex.quote(str(log_dir / "update.log")),
    )


def write_update_script(home: Optional[Path] = None) -> Path:
    script = update_script_path(home)
    script.parent.mkdir(parents=True, exist_ok=True)
    script.write_text(render_update_script(home), encoding="utf-8")
    script.chmod(0o755)
    get_logger().info(f"Wrote update script {script}")
    return script


def read_crontab() -> str:
    result = run_command(["crontab", "-l"], capture_output=True, check=False)
    if result.returncode == 0:
        return result.stdout
    if "no crontab" in (result.stderr or "").lower():
        return ""
    raise SetupError(f"Could not read crontab: {(result.stderr or '').strip()}")


def cron_command(script: Path) -> str:
    """Quote a path for the command part of a crontab line; cron reads a bare '%' as a newline."""
    return shlex.quote(str(script)).replace("%", "\\%")


def crontab_command_path(line: str) -> Optional[str]:
    """The program a crontab line runs, unquoted, or None for comments and settings."""
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None
    if stripped.startswith("@"):
        parts = stripped.split(None, 1)
    else:
        parts = stripped.split(None, 5)
        if len(parts) < 6:
            return None
    if len(parts) < 2:
        return None
    try:
        tokens = shlex.split(parts[-1].replace("\\%", "%"))
    except ValueError:
        return None
    return tokens[0] if tokens else None


def add_crontab_entry(existing: str, schedule: str, script: Path) -> Optional[str]:
    """
    Return the crontab with the update line appended, or None when a
    line already runs the script.
    """
    for line in existing.splitlines():
        if crontab_command_path(line) == str(script):
            return None
    content = existing
    if content and not content.endswith("\n"):
        content += "\n"
    return content + f"{schedule} {cron_command(script)}\n"


def install_crontab(content: str) -> None:
    result = run_command(["crontab", "-"], input=content, check=False)
    if result.returncode != 0:
        raise SetupError(f"Failed to update crontab: {(result.stderr or '').strip()}")


def ensure_cron_service(target: Platform) -> bool:
    service = CRON_SERVICES.get(target)
    if service is None or not command_exists("systemctl"):
        return False
    print_step(f"Enabling {service} service...")
    run_command(["sudo", "systemctl", "enable", "--now", service])
    return True


def register_cron(schedule: str, target: Platform, home: Optional[Path] = None) -> bool:
    """
    Schedule the dotfiles refresh. Returns True when a crontab line was
    added and False when one was already present.
    """
    logger = get_logger()
    schedule = validate_schedule(schedule)
    if not command_exists("crontab"):
        raise SetupError("crontab is not available; install a cron daemon first")

    script = write_update_script(home)
    ensure_cron_service(target)

    updated = add_crontab_entry(read_crontab(), schedule, script)
    if updated is None:
        logger.info(f"Crontab already runs {script}")
        return False

    print_step(f"Adding crontab entry: {schedule} {cron_command(script)}")
    install_crontab(updated)
    logger.info("Crontab updated")
    return True
