"""
Thin wrappers around subprocess and the filesystem.

Every setup step shells out through run_command so that each call is
logged, streamed to the console and recorded in the transcript the same way.
"""

import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .log import get_logger
from .ui import NordColors, console

TEMP_PREFIX = "dotstrap_"

# Temporary paths created by this process; cleanup never touches any other.
_temp_paths: List[Path] = []


def local_bin(home: Optional[Path] = None) -> Path:
    return (home or Path.home()) / ".local" / "bin"


def run_command(
    cmd: Sequence[str],
    capture_output: bool = False,
    check: bool = True,
    input: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """
    Run an external command.

    With capture_output the output is returned on the result and only
    logged at DEBUG. Otherwise stdout and stderr are merged, echoed to the
    console line by line and written to the transcript as they arrive.
    Raises CalledProcessError on a non-zero exit when check is set.
    """
    logger = get_logger()
    cmd = [str(part) for part in cmd]
    cmd_str = " ".join(cmd)
    logger.debug(f"Running command: {cmd_str}")
    full_env = {**os.environ, **env} if env else None

    try:
        if capture_output or input is not None:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                input=input,
                env=full_env,
            )
            if result.stdout and result.stdout.strip():
                logger.debug(f"Cmd stdout: {result.stdout.strip()}")
            if result.stderr and result.stderr.strip():
                logger.debug(f"Cmd stderr: {result.stderr.strip()}")
        else:
            result = _stream_command(cmd, full_env)
    except FileNotFoundError:
        logger.error(f"Command not found: {cmd[0]}. Ensure it is installed and in PATH.")
        raise

    if check and result.returncode != 0:
        error_msg = f"Command '{cmd_str}' failed with code {result.returncode}."
        if result.stderr and result.stderr.strip():
            error_msg += f"\nStderr: {result.stderr.strip()}"
        logger.error(error_msg)
        raise subprocess.CalledProcessError(
            result.returncode, cmd, output=result.stdout, stderr=result.stderr
        )
    return result


def _stream_command(cmd: List[str], env: Optional[Dict[str, str]]) -> subprocess.CompletedProcess:
    logger = get_logger()
    output: List[str] = []
    with subprocess.Popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
        env=env,
    ) as proc:
        for line in proc.stdout:
            line = line.rstrip("\n")
            output.append(line)
            console.print(line, style=NordColors.SNOW_STORM_1, markup=False, highlight=False)
            logger.debug(line)
        returncode = proc.wait()
    return subprocess.CompletedProcess(cmd, returncode, stdout="\n".join(output), stderr="")


def command_exists(cmd: str) -> bool:
    exists = shutil.which(cmd)
    get_logger().debug(f"Command '{cmd}' found: {bool(exists)}")
    return bool(exists)


def fetch_text(url: str) -> str:
    return run_command(["curl", "-fsSL", url], capture_output=True).stdout


def download_file(url: str, dest: Union[str, Path]) -> Path:
    dest = Path(dest)
    get_logger().info(f"Downloading {url} to {dest}...")
    run_command(["curl", "-fL", "--progress-bar", "-o", str(dest), url])
    return dest


def run_remote_script(
    url: str,
    args: Sequence[str] = (),
    shell: str = "sh",
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """Fetch an upstream install script and run it, like `sh -c "$(curl ...)" -- args`."""
    script = fetch_text(url)
    return run_command([shell, "-c", script, "--", *args], env=env)


def prepend_path(directory: Union[str, Path]) -> None:
    directory = str(directory)
    entries = os.environ.get("PATH", "").split(os.pathsep)
    if directory not in entries:
        os.environ["PATH"] = os.pathsep.join([directory] + [e for e in entries if e])
        get_logger().debug(f"Added {directory} to PATH")


def backup_file(file_path: Union[str, Path]) -> Optional[Path]:
    file_path = Path(file_path)
    if not file_path.is_file():
        get_logger().warning(f"Cannot backup non-existent file: {file_path}")
        return None
    backup_path = file_path.with_name(file_path.name + ".bak")
    shutil.copy2(file_path, backup_path)
    get_logger().debug(f"Backed up {file_path} to {backup_path}")
    return backup_path


def make_temp_path(suffix: str = "") -> Path:
    fd, name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=suffix)
    os.close(fd)
    path = Path(name)
    _temp_paths.append(path)
    return path


def cleanup_temp_files() -> None:
    logger = get_logger()
    while _temp_paths:
        item = _temp_paths.pop()
        if not item.exists():
            continue
        try:
            item.unlink() if item.is_file() else shutil.rmtree(item)
            logger.debug(f"Removed temporary item {item}")
        except OSError as e:
            logger.warning(f"Failed to clean up {item}: {e}")
