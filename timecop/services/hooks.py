"""
post-commit hook that asks for a log entry after every commit.
"""
from __future__ import annotations

import os
import shlex
import stat
from pathlib import Path
from typing import Sequence

from timecop.core.errors import HookExistsError
from timecop.core.logging_config import get_logger

HOOK_NAME = "post-commit"

log = get_logger("timecop.hooks")


def hook_script(command: Sequence[str]) -> str:
    """Bash hook running `command log --commit`. Each argument is shell-quoted."""
    return f"""#!/usr/bin/env bash

# Offer a nice interactive experience
exec < /dev/tty

# Start a new commit based log entry
{shlex.join([*command, "log", "--commit"])}

# Close stdin again
exec <&-
"""


def hook_path(git_dir: Path) -> Path:
    return Path(git_dir) / "hooks" / HOOK_NAME


def install_hook(git_dir: Path, command: Sequence[str], overwrite: bool = False) -> Path:
    """Write the hook into `git_dir`. Raises HookExistsError unless `overwrite`."""
    path = hook_path(git_dir)
    if path.exists() and not overwrite:
        raise HookExistsError(path)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(hook_script(command))
    mode = os.stat(path).st_mode
    os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    log.info("installed %s hook at %s", HOOK_NAME, path)
    return path
