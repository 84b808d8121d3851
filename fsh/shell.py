"""The interactive shell: reading lines and dispatching them."""

from __future__ import annotations

import argparse
import sys

from fsh.commands import Executor
from fsh.externs import execute_external_command
from fsh.interns import Builtins
from fsh.pipeline import PipelineSyntaxError, check_pipe, handle_pipe
from fsh.prompt import generate_prompt
from fsh.redirections import RedirectionError, SavedStreams, apply_redirections
from fsh.signals import setup_signals
from fsh.tokenizer import tokenize

try:
    import readline  # noqa: F401  (line editing and history for input())
except ImportError:
    readline = None


def _error(message: str) -> None:
    print(message, file=sys.stderr, flush=True)


def _plain(prompt: str) -> str:
    """Drop the markers that only line editing understands."""
    return prompt.replace("\001", "").replace("\002", "")


class Shell:
    """A shell session holding the status of the last command."""

    def __init__(self) -> None:
        self.builtins = Builtins()
        self.executor = Executor(self.builtins)
        self.last_return = 0

    def run_line(self, line: str) -> int:
        """Run one command line and return the new last status.

        Blank lines leave the status unchanged. ``exit`` raises ``SystemExit``.
        """
        if not line.strip():
            return self.last_return
        self.last_return = self._dispatch(line)
        return self.last_return

    def _dispatch(self, line: str) -> int:
        if ";" in line and "for" not in line and "if" not in line:
            return self.executor.execute(line)

        try:
            tokens = tokenize(line, " ")
        except ValueError as err:
            _error(f"Erreur: {err}")
            return 1
        if not tokens:
            return self.last_return

        try:
            if check_pipe(tokens):
                return self.last_return if handle_pipe(tokens) == 0 else 1
        except PipelineSyntaxError as err:
            _error(f"Erreur : {err}")
            return 1

        with SavedStreams():
            try:
                tokens = apply_redirections(tokens)
            except RedirectionError as err:
                _error(f"Erreur d'ouverture du fichier: {err}")
                return 1
            if not tokens:
                return self.last_return
            return self._run_tokens(tokens)

    def _run_tokens(self, tokens: list[str]) -> int:
        name = tokens[0]
        if name == "if":
            try:
                return self.executor.handle_if_else(tokens, self.last_return)
            except ValueError as err:
                _error(str(err))
                return 1
        status = self.builtins.handle(name, tokens[1:], self.last_return)
        if status is not None:
            return status
        if name == "for":
            return self.executor.execute(" ".join(tokens))
        return execute_external_command(tokens)

    def _read(self, prompt: str) -> str | None:
        if sys.stdin.isatty():
            try:
                return input(prompt)
            except EOFError:
                return None
        sys.stderr.write(_plain(prompt))
        sys.stderr.flush()
        line = sys.stdin.readline()
        if not line:
            return None
        return line.rstrip("\n")

    def repl(self) -> int:
        """Read and run lines until end of input; return the last status."""
        with SavedStreams() as streams:
            while True:
                streams.reset()
                line = self._read(generate_prompt(self.last_return))
                if line is None:
                    break
                self.run_line(line)
        return self.last_return


def main(argv=None) -> int:
    """Start an interactive session and return its final status."""
    parser = argparse.ArgumentParser(prog="fsh", description="A small interactive shell.")
    parser.parse_args(argv)
    setup_signals()
    return Shell().repl()