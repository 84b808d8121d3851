"""Running commands connected by pipes."""

from __future__ import annotations

import os
import subprocess
import sys

from fsh.redirections import OPERATORS, RedirectionError, apply_redirections

PIPE = "|"


class PipelineSyntaxError(ValueError):
    """A pipeline is malformed: a pipe at either end or two pipes in a row."""


def check_pipe(tokens) -> bool:
    """Return True if ``tokens`` hold at least one pipe, all well placed.

    Raises ``PipelineSyntaxError`` for a pipe at the start or end of the
    command, or for two pipes in a row.
    """
    tokens = list(tokens)
    found = False
    previous_was_pipe = False
    for position, token in enumerate(tokens):
        if token != PIPE:
            previous_was_pipe = False
            continue
        if position == 0 or position == len(tokens) - 1:
            raise PipelineSyntaxError("pipe at the start or end of the command")
        if previous_was_pipe:
            raise PipelineSyntaxError("successive pipes")
        found = True
        previous_was_pipe = True
    return found


def split_pipeline(tokens) -> list[list[str]]:
    """Split ``tokens`` into the commands separated by ``|``."""
    commands: list[list[str]] = [[]]
    for token in tokens:
        if token == PIPE:
            commands.append([])
        else:
            commands[-1].append(token)
    return commands


def _strip_redirections(command: list[str]) -> list[str]:
    """Return the arguments of ``command`` without redirection operators."""
    args: list[str] = []
    items = iter(command)
    for token in items:
        if token in OPERATORS:
            next(items, None)
        else:
            args.append(token)
    return args


def _spawn(command: list[str], stdin, stdout) -> subprocess.Popen | None:
    args = _strip_redirections(command)
    if not args:
        print("execvp: empty command", file=sys.stderr)
        return None

    def prepare_child() -> None:
        apply_redirections(command)

    try:
        return subprocess.Popen(
            args,
            stdin=stdin,
            stdout=stdout,
            close_fds=True,
            preexec_fn=prepare_child,
        )
    except OSError as err:
        print(f"execvp: {err.strerror}", file=sys.stderr)
    except (subprocess.SubprocessError, RedirectionError) as err:
        print(f"Erreur lors des redirections: {err}", file=sys.stderr)
    return None


def handle_pipe(tokens) -> int:
    """Run the commands of a pipeline, each fed by the previous one.

    Redirections inside a command apply to that command alone. Returns 0
    once every command has finished, or 1 if the pipes could not be made.
    """
    commands = split_pipeline(tokens)
    if any(not command for command in commands):
        raise PipelineSyntaxError("empty command in pipeline")

    pipes: list[tuple[int, int]] = []
    try:
        for _ in commands[1:]:
            pipes.append(os.pipe())
    except OSError as err:
        print(f"pipe: {err.strerror}", file=sys.stderr)
        for read_end, write_end in pipes:
            os.close(read_end)
            os.close(write_end)
        return 1

    sys.stdout.flush()
    sys.stderr.flush()

    processes: list[subprocess.Popen] = []
    try:
        for position, command in enumerate(commands):
            stdin = pipes[position - 1][0] if position > 0 else None
            stdout = pipes[position][1] if position < len(pipes) else None
            process = _spawn(command, stdin, stdout)
            if process is not None:
                processes.append(process)
    finally:
        for read_end, write_end in pipes:
            os.close(read_end)
            os.close(write_end)

    for process in processes:
        process.wait()
    return 0