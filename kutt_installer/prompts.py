# Path and File Name : /home/kutt/kutt-installer/kutt_installer/prompts.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Interactive operator prompts - free text, secrets, menus and yes/no confirmations

"""
Operator prompts.

All interaction goes through a Prompter so collectors and the teardown
sequencer can be driven by a scripted prompter in tests. Prompts block
until answered; there is no timeout.
"""

import getpass
from typing import Callable, Optional, Sequence

from .errors import InputValidationError


class Prompter:
    """Reads answers from the terminal."""

    def __init__(self, input_func: Callable[[str], str] = input,
                 secret_func: Callable[[str], str] = getpass.getpass,
                 output_func: Callable[[str], None] = print):
        self._input = input_func
        self._secret = secret_func
        self._output = output_func

    def say(self, text: str = "") -> None:
        self._output(text)

    def ask(self, prompt: str, default: Optional[str] = None) -> str:
        """Ask for free text; blank input returns default (or "")."""
        answer = self._input(f"{prompt}: ").strip()
        if not answer and default is not None:
            return default
        return answer

    def ask_secret(self, prompt: str, default: Optional[str] = None) -> str:
        """Like ask() but without echo."""
        answer = self._secret(f"{prompt}: ").strip()
        if not answer and default is not None:
            return default
        return answer

    def ask_required(self, prompt: str, error: str, secret: bool = False) -> str:
        """
        Ask for a value that may not be blank.

        Raises:
            InputValidationError: If the operator enters nothing
        """
        answer = self.ask_secret(prompt) if secret else self.ask(prompt)
        if not answer:
            raise InputValidationError(error)
        return answer

    def choose(self, title: str, options: Sequence[str], default: int = 1) -> int:
        """
        Numbered menu. Returns the 1-based choice; blank selects default.

        Anything that is not a listed number also falls back to default,
        matching "Choose [1/2] (default: 1)" semantics.
        """
        self.say(title)
        for index, option in enumerate(options, start=1):
            self.say(f"  {index}) {option}")
        numbers = "/".join(str(i) for i in range(1, len(options) + 1))
        raw = self.ask(f"Choose [{numbers}] (default: {default})", default=str(default))
        try:
            choice = int(raw)
        except ValueError:
            return default
        if 1 <= choice <= len(options):
            return choice
        return default

    def confirm(self, prompt: str, default: bool = False) -> bool:
        """Yes/no question; blank takes default."""
        suffix = "[Y/n]" if default else "[y/N]"
        raw = self._input(f"{prompt} {suffix}: ").strip().lower()
        if not raw:
            return default
        return raw == "y"
