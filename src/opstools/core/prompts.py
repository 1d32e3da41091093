"""Interactive confirmation prompts."""

from __future__ import annotations

import questionary
from questionary import Style

# Custom questionary style
STYLE = Style([
    ("qmark", "fg:cyan bold"),
    ("question", "bold"),
    ("answer", "fg:cyan"),
    ("pointer", "fg:cyan bold"),
    ("highlighted", "fg:cyan bold"),
    ("selected", "fg:cyan"),
])


class Prompts:
    """Yes/no prompts, bypassed entirely when ``assume_yes`` is set."""

    def __init__(self, assume_yes: bool = False):
        self._assume_yes = assume_yes

    @property
    def assume_yes(self) -> bool:
        return self._assume_yes

    def confirm(self, message: str, default: bool = True) -> bool:
        """Ask a yes/no question.

        Args:
            message: Question to display.
            default: Answer selected when the user just presses enter.

        Returns:
            True if the user agreed. An aborted prompt (Ctrl-C) counts as no.
        """
        if self._assume_yes:
            return True

        answer = questionary.confirm(message, default=default, style=STYLE).ask()
        return bool(answer)
