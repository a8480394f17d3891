"""
Terminal dialogue for interactive operations.

Project operations talk to the user only through a Console so tests
can script the answers.
"""

import sys
from typing import Optional, TextIO


class Console:
    """
    Line-oriented prompt and message channel.

    Args:
        stdin: Stream answers are read from (default sys.stdin)
        stdout: Stream messages are written to (default sys.stdout)
    """

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self._stdin = stdin
        self._stdout = stdout

    @property
    def stdin(self) -> TextIO:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def say(self, message: str = "") -> None:
        print(message, file=self.stdout, flush=True)

    def ask(self, prompt: str) -> str:
        """
        Print prompt and read one answer line, stripped of whitespace.

        Raises:
            EOFError: if input ends before an answer is given
        """
        self.say(prompt)
        line = self.stdin.readline()
        if not line:
            raise EOFError("no input available")
        return line.strip()
