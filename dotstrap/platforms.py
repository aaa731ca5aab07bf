"""
Platform detection.

Maps the running OS (and, on Linux, the distribution ID from
/etc/os-release) to one of the supported platform tags.
"""

import platform
import shlex
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

from .errors import SetupError
from .log import get_logger

OS_RELEASE = Path("/etc/os-release")


class Platform(str, Enum):
    DEBIAN = "debian"
    FEDORA = "fedora"
    ARCH = "arch"
    MACOS = "macos"

    @property
    def is_linux(self) -> bool:
        return self is not Platform.MACOS


DISTRO_FAMILIES: Dict[str, Platform] = {
    "debian": Platform.DEBIAN,
    "ubuntu": Platform.DEBIAN,
    "pop": Platform.DEBIAN,
    "fedora": Platform.FEDORA,
    "rhel": Platform.FEDORA,
    "centos": Platform.FEDORA,
    "arch": Platform.ARCH,
    "manjaro": Platform.ARCH,
}


def parse_os_release(content: str) -> Dict[str, str]:
    """Parse the KEY=value lines of an os-release file, unquoting values."""
    data: Dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = [value.strip().strip("\"'")]
        data[key.strip()] = parts[0] if parts else ""
    return data


def platform_for_distro(distro_id: str) -> Platform:
    try:
        return DISTRO_FAMILIES[distro_id.strip().lower()]
    except KeyError:
        raise SetupError(f"Unsupported Linux distro: {distro_id}") from None


def detect_platform(
    system: Optional[str] = None, os_release: Union[str, Path] = OS_RELEASE
) -> Platform:
    logger = get_logger()
    system = system if system is not None else platform.system()

    if system == "Darwin":
        detected = Platform.MACOS
    elif system == "Linux":
        os_release = Path(os_release)
        if not os_release.is_file():
            raise SetupError("Could not detect Linux distribution")
        data = parse_os_release(os_release.read_text(encoding="utf-8", errors="replace"))
        detected = platform_for_distro(data.get("ID", ""))
        logger.debug(f"Distribution: {data.get('PRETTY_NAME', data.get('ID', 'N/A'))}")
    else:
        raise SetupError(f"Unsupported OS: {system or 'unknown'}")

    logger.info(f"Detected platform: {detected.value}")
    return detected
