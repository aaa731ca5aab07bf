import getpass
import os
import shutil
from typing import Optional

from .commands import run_command
from .errors import SetupError
from .log import get_logger
from .ui import print_step

TARGET_SHELL = "zsh"


def current_user() -> str:
    return os.environ.get("USER") or getpass.getuser()


def setup_shell(login_shell: Optional[str] = None, user: Optional[str] = None) -> bool:
    """
    Make zsh the login shell of the invoking user.

    Returns True when the shell was changed, False when it already was zsh.
    """
    logger = get_logger()
    login_shell = os.environ.get("SHELL", "") if login_shell is None else login_shell
    if TARGET_SHELL in login_shell:
        logger.info(f"Login shell is already {login_shell}")
        return False

    zsh_path = shutil.which(TARGET_SHELL)
    if not zsh_path:
        raise SetupError("zsh is not installed; cannot change the login shell")

    user = user or current_user()
    print_step(f"Changing default shell to {zsh_path} for {user}...")
    run_command(["sudo", "chsh", "-s", zsh_path, user])
    logger.info(f"Default shell for {user} set to {zsh_path}")
    return True
