# Path and File Name : /home/kutt/kutt-installer/kutt_installer/system/commands.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Single choke point for running external commands - logging, env, error translation

"""
Command Runner: every external tool invocation goes through run().

check=True turns a non-zero exit into CommandError. check=False hands the
completed process back so tolerant steps can inspect returncode themselves.
"""

import logging
import os
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import CommandError

logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs external commands with captured output."""

    NONINTERACTIVE_ENV = {'DEBIAN_FRONTEND': 'noninteractive'}

    def __init__(self, default_timeout: Optional[int] = None):
        self.default_timeout = default_timeout

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)

    def run(self, args: List[str], check: bool = True, cwd: Optional[Path] = None,
            env: Optional[Dict[str, str]] = None, input_text: Optional[str] = None,
            timeout: Optional[int] = None) -> subprocess.CompletedProcess:
        """
        Run args and capture stdout/stderr as text.

        Args:
            args: argv list (no shell unless run_shell() is used)
            check: Raise CommandError on non-zero exit
            cwd: Working directory
            env: Extra environment variables merged over os.environ
            input_text: Data written to stdin
            timeout: Seconds before the command is killed

        Returns:
            subprocess.CompletedProcess

        Raises:
            CommandError: If check and the command fails, or the binary is missing
        """
        merged_env = os.environ.copy()
        merged_env.update(self.NONINTERACTIVE_ENV)
        if env:
            merged_env.update(env)

        logger.debug(f"$ {shlex.join(args)}" + (f"  (cwd={cwd})" if cwd else ""))
        try:
            result = subprocess.run(
                args,
                cwd=str(cwd) if cwd else None,
                env=merged_env,
                input=input_text,
                capture_output=True,
                text=True,
                timeout=timeout or self.default_timeout,
            )
        except FileNotFoundError:
            if check:
                raise CommandError(args, 127, f"{args[0]}: command not found")
            return subprocess.CompletedProcess(args, 127, "", f"{args[0]}: command not found")
        except subprocess.TimeoutExpired as e:
            raise CommandError(args, -1, f"timed out after {e.timeout}s")

        if result.stdout:
            logger.debug(result.stdout.rstrip())
        if result.stderr:
            logger.debug(result.stderr.rstrip())

        if check and result.returncode != 0:
            raise CommandError(args, result.returncode, result.stderr or result.stdout)
        return result

    def run_shell(self, script: str, check: bool = True, cwd: Optional[Path] = None) -> subprocess.CompletedProcess:
        """Run a shell pipeline through /bin/sh -c (used for curl | sh installers)."""
        return self.run(["/bin/sh", "-c", script], check=check, cwd=cwd)

    def succeeds(self, args: List[str], cwd: Optional[Path] = None) -> bool:
        """True if args exits 0."""
        return self.run(args, check=False, cwd=cwd).returncode == 0
