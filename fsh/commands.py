"""Command execution: sequences, ``if``/``else`` blocks and ``for`` loops."""

from __future__ import annotations

import os
import re
import stat
import sys
from dataclasses import dataclass, field

from fsh import externs
from fsh.externs import SignalStatus, execute_external_command
from fsh.interns import Builtins
from fsh.tokenizer import tokenize

MAX_LENGTH = 256

_WORD = re.compile(r"\S+")
_FOR_SYNTAX = "Erreur: syntaxe incorrecte, la commande doit être : for F in REP { CMD }"


def _error(message: str) -> None:
    print(message, file=sys.stderr, flush=True)


def args_to_cmd(args) -> str:
    """Join ``args`` into one command line, each followed by a space."""
    return "".join(f"{arg} " for arg in args)


def replace_variable(command: str, variable: str, replacement: str) -> str:
    """Replace every ``$variable`` in ``command`` with ``replacement``.

    The result is cut to ``MAX_LENGTH - 1`` characters.
    """
    return command.replace(f"${variable}", replacement)[: MAX_LENGTH - 1]


def split_sequence(cmd: str) -> list[str]:
    """Split ``cmd`` on the semicolons that are outside any ``{ }`` block.

    Segments are stripped and blank ones are dropped.
    """
    segments: list[str] = []
    depth = 0
    start = 0
    for position, char in enumerate(cmd):
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        elif char == ";" and depth == 0:
            segments.append(cmd[start:position])
            start = position + 1
    segments.append(cmd[start:])
    return [segment.strip() for segment in segments if segment.strip()]


@dataclass(frozen=True)
class ForOptions:
    """Options of a ``for`` loop: -A, -r, -e EXT, -t TYPE and -p MAX."""

    include_hidden: bool = False
    recursive: bool = False
    extension: str = ""
    file_type: str | None = None
    max_parallel: int | None = None


@dataclass(frozen=True)
class ForLoop:
    """A parsed ``for VAR in DIR [options] { BODY }`` command."""

    variable: str
    directory: str
    body: str
    options: ForOptions = field(default_factory=ForOptions)


def parse_for(command: str) -> ForLoop:
    """Parse a ``for`` command; raise ``ValueError`` if it is malformed."""
    words = list(_WORD.finditer(command))
    texts = [word.group() for word in words]
    if len(texts) < 4 or texts[0] != "for" or texts[2] != "in":
        raise ValueError(_FOR_SYNTAX)
    variable, directory = texts[1], texts[3]

    include_hidden = False
    recursive = False
    extension = ""
    file_type: str | None = None
    max_parallel: int | None = None

    index = 4
    while index < len(texts) and texts[index] != "{":
        option = texts[index]
        if option in ("-e", "-t", "-p"):
            if index + 1 >= len(texts):
                raise ValueError(f"missing value after {option}")
            index += 1
            value = texts[index]
            if option == "-e":
                extension = value
            elif option == "-t":
                file_type = value[0]
            else:
                try:
                    max_parallel = int(value)
                except ValueError:
                    raise ValueError(f"invalid value for -p: {value}") from None
                if max_parallel <= 0:
                    raise ValueError(f"invalid value for -p: {value}")
        elif option == "-A":
            include_hidden = True
        elif option == "-r":
            recursive = True
        index += 1

    if index >= len(texts):
        raise ValueError("Erreur: '{' manquant")
    body_start = words[index].end()
    body_end = command.rfind("}")
    if body_end < body_start:
        raise ValueError("Erreur: '}' manquant")
    if len(variable) != 1:
        raise ValueError("Syntaxe incorrecte: for F in REP { CMD }")

    options = ForOptions(include_hidden, recursive, extension, file_type, max_parallel)
    return ForLoop(variable, directory, command[body_start:body_end].strip(), options)


def _block(tokens: list[str], start: int) -> tuple[list[str], int]:
    """Return the tokens of the block opened just before ``start`` and the index after it."""
    depth = 1
    for position in range(start, len(tokens)):
        if tokens[position] == "{":
            depth += 1
        elif tokens[position] == "}":
            depth -= 1
            if depth == 0:
                return tokens[start:position], position + 1
    raise ValueError("Erreur : blocs { ... } mal équilibrés")


def _split_block(tokens: list[str]) -> list[list[str]]:
    """Split block tokens on ``;`` tokens outside nested braces."""
    commands: list[list[str]] = [[]]
    depth = 0
    for token in tokens:
        if token == "{":
            depth += 1
        elif token == "}":
            depth -= 1
        if token == ";" and depth == 0:
            commands.append([])
        else:
            commands[-1].append(token)
    return [command for command in commands if command]


def _file_type(path: str) -> str | None:
    mode = os.stat(path).st_mode
    if stat.S_ISREG(mode):
        return "f"
    if stat.S_ISDIR(mode):
        return "d"
    if stat.S_ISLNK(mode):
        return "l"
    if stat.S_ISFIFO(mode):
        return "p"
    return None


def _reap() -> int | None:
    """Wait for one child and return its exit status if it exited normally."""
    _, status = os.wait()
    return os.WEXITSTATUS(status) if os.WIFEXITED(status) else None


class Executor:
    """Runs command lines with built-ins, ``if``, ``for`` and external programs."""

    def __init__(self, builtins: Builtins | None = None) -> None:
        self.builtins = builtins if builtins is not None else Builtins()

    def execute(self, cmd: str, file: str | None = None, variable: str | None = None) -> int:
        """Run ``cmd``, with ``$variable`` replaced by ``file``, and return its status."""
        segments = split_sequence(cmd)
        if len(segments) > 1:
            result = 0
            for segment in segments:
                result = self.execute(segment, file, variable)
                if externs.last_was_signal == SignalStatus.INTERRUPTED:
                    break
            return result

        command = segments[0] if segments else ""
        if variable and file is not None:
            command = replace_variable(command, variable, file)

        try:
            tokens = tokenize(command, " ")
        except ValueError as err:
            _error(f"Erreur: {err}")
            return 1
        if not tokens:
            _error("Erreur: commande vide après substitution")
            return 1

        name = tokens[0]
        status = self.builtins.handle(name, tokens[1:], 0)
        if status is not None:
            return status
        if name == "for":
            return self.handle_for(command)
        if name == "if":
            try:
                return self.handle_if_else(tokens, 0)
            except ValueError as err:
                _error(str(err))
                return 1
        return execute_external_command(tokens)

    def execute_tokens(self, args) -> int:
        """Run the command made of the words ``args``."""
        return self.execute(args_to_cmd(args))

    def _run_block(self, block: list[str], last_return: int) -> int:
        for command in _split_block(block):
            last_return = self.execute_tokens(command)
        return last_return

    def handle_if_else(self, tokens, last_return: int = 0) -> int:
        """Run ``if TEST { CMD_1 } [else { CMD_2 }]`` and return the new status.

        Raises ``ValueError`` when the blocks are missing or unbalanced.
        """
        tokens = list(tokens)
        if not tokens or tokens[0] != "if":
            raise ValueError("Erreur : la commande ne commence pas par 'if'")
        try:
            open_at = tokens.index("{", 1)
        except ValueError:
            raise ValueError("Erreur : 'if' sans bloc { ... }") from None

        test_result = self.execute_tokens(tokens[1:open_at])
        then_block, after = _block(tokens, open_at + 1)
        if test_result == 0:
            return self._run_block(then_block, last_return)

        if after < len(tokens) - 1 and tokens[after] == "else":
            if tokens[after + 1] != "{":
                raise ValueError("Erreur : 'else' sans bloc { ... }")
            else_block, _ = _block(tokens, after + 2)
            return self._run_block(else_block, last_return)
        return 0

    def handle_for(self, command: str) -> int:
        """Parse and run a ``for`` command; a syntax error gives status 1."""
        try:
            loop = parse_for(command)
        except ValueError as err:
            _error(str(err))
            return 1
        return self.run_for(loop.directory, loop.body, loop.options, loop.variable)

    def _run_child(self, cmd: str, filepath: str, variable: str | None) -> int:
        sys.stdout.flush()
        sys.stderr.flush()
        pid = os.fork()
        if pid == 0:
            code = 1
            try:
                code = self.execute(cmd, filepath, variable)
            except SystemExit as exc:
                code = exc.code if isinstance(exc.code, int) else 1
            finally:
                sys.stdout.flush()
                sys.stderr.flush()
                os._exit(code & 0xFF)
        return pid

    def run_for(
        self,
        directory: str,
        cmd: str,
        options: ForOptions | None = None,
        variable: str | None = None,
    ) -> int:
        """Run ``cmd`` for every entry of ``directory`` and return the highest status."""
        options = options or ForOptions()
        try:
            names = sorted(os.listdir(directory))
        except OSError as err:
            _error(f"Erreur lors de l'ouverture du répertoire: {err.strerror}")
            return 1

        last_return = 0
        active = 0
        for name in names:
            if externs.last_was_signal == SignalStatus.INTERRUPTED:
                break
            if not options.include_hidden and name.startswith("."):
                continue

            filepath = f"{directory}/{name}"
            if options.extension:
                dot = filepath.rfind(".")
                if dot < 0 or filepath[dot + 1:] != options.extension:
                    continue
                filepath = filepath[:dot]

            if options.recursive and os.path.isdir(filepath):
                last_return = max(last_return, self.run_for(filepath, cmd, options, variable))

            if options.file_type:
                try:
                    kind = _file_type(filepath)
                except OSError as err:
                    _error(
                        "Erreur lors de l'obtention des informations du fichier: "
                        f"{err.strerror}"
                    )
                    continue
                if kind != options.file_type:
                    continue

            if options.max_parallel:
                try:
                    self._run_child(cmd, filepath, variable)
                except OSError as err:
                    _error(f"Erreur lors de la création du processus: {err.strerror}")
                    return 1
                active += 1
                while active >= options.max_parallel:
                    status = _reap()
                    active -= 1
                    if status is not None:
                        last_return = max(last_return, status)
            else:
                last_return = max(last_return, self.execute(cmd, filepath, variable))

        while active > 0:
            status = _reap()
            active -= 1
            if status is not None:
                last_return = max(last_return, status)
        return last_return