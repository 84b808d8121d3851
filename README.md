# fsh

A small interactive shell for POSIX systems. The prompt shows the status of the
last command and the current directory. The shell has four built-in commands.
It can loop over the entries of a directory, and it supports `if`/`else`,
sequences, pipelines and redirections.

## Installation

```
pip install .
```

## Usage

Start the shell:

```
fsh
```

The only option is `-h`/`--help`. The shell reads one line at a time until end
of input (Ctrl+D) and then exits with the status of the last command.

When standard input is a terminal, lines are read with line editing and history
where `readline` is available. When it is not a terminal, lines are read from
standard input and the prompt is written to standard error.

### Prompt

The prompt looks like `[0]/home/user$ `. The status is green when it is zero
and red when it is not. When the last external command was killed by a signal,
`[SIG]` is shown in its place. A long directory is shortened with a leading
`...`, so that the status part and the directory together take at most 29
characters.

### Built-in commands

- `pwd`: print the current directory. It takes no arguments.
- `cd [DIR]`: change directory. With no argument it goes to `$HOME`. `cd -`
  goes back to the previous directory.
- `ftype PATH`: print the type of `PATH` without following links. The types are
  `regular file`, `directory`, `symbolic link`, `named pipe` and `other`.
- `exit [CODE]`: leave the shell. With no code it uses the last status.

Any other command is looked up on `PATH` and run as an external program. A
program that cannot be started gives status 1. A program killed by a signal
gives status 255.

### Sequences

```
cmd1 ; cmd2 ; cmd3
```

The commands run in order, and the status is that of the last one run. If a
command is interrupted with Ctrl+C, the rest of the sequence is skipped.

### Conditionals

```
if TEST { CMD1 } else { CMD2 }
```

`CMD1` runs when `TEST` returns 0. Otherwise `CMD2` runs, if there is an `else`
block. With no `else` block the status is 0. A block may hold several commands
separated by ` ; `. Missing or unbalanced braces are reported as an error with
status 1.

### Loops over directories

```
for F in DIR [-A] [-r] [-e EXT] [-t TYPE] [-p MAX] { CMD $F }
```

`CMD` runs once for each entry of `DIR`, in sorted order. Each `$F` in `CMD` is
replaced with the entry's path, `DIR/NAME`. The loop variable must be a single
character.

- `-A`: include hidden entries.
- `-r`: also walk subdirectories.
- `-e EXT`: only entries whose extension is `EXT`. The extension is removed
  from the path given to the command.
- `-t TYPE`: only entries of the given type: `f` for regular files, `d` for
  directories, `l` for links, `p` for named pipes.
- `-p MAX`: run up to `MAX` commands at once, each in a child process. `MAX`
  must be a positive integer.

The loop's status is the highest status of the commands it ran. It is 1 if the
directory cannot be opened or the loop is malformed.

### Pipelines and redirections

```
ls -l | grep txt | wc -l
sort < input.txt >> sorted.txt 2>| errors.txt
```

| Operator | Effect |
|----------|--------|
| `<`      | read standard input from a file |
| `>`      | write standard output to a new file; fails if the file exists |
| `>\|`    | write standard output to a file, overwriting it |
| `>>`     | append standard output to a file |
| `2>`, `2>\|`, `2>>` | the same, for standard error |

In a pipeline, a redirection applies only to the command it is written in. A
pipe at the start or end of a line, or two pipes in a row, is an error. A
pipeline leaves the last status unchanged.

### Use from Python

```python
from fsh.shell import Shell

shell = Shell()
status = shell.run_line("for F in . -e py { ftype $F.py }")
```

`Shell.run_line` runs one line and returns the new status. `Shell.repl` runs the
interactive loop. The pieces are also usable on their own: `fsh.tokenizer.tokenize`,
`fsh.commands.Executor`, `fsh.commands.parse_for`, `fsh.pipeline.handle_pipe`,
`fsh.redirections.apply_redirections` and `fsh.prompt.generate_prompt`.

## What it does not do

- Words are split on spaces only. There is no quoting or escaping, so operators
  and braces must be surrounded by spaces.
- There is no globbing, no environment variable expansion and no shell
  variables other than the loop variable of `for`.
- Pipelines and redirections are handled only for a whole line. Inside a
  sequence, an `if` block or a `for` body, `|`, `<`, `>` and the like are passed
  to the program as plain arguments.
- There is no job control, no background jobs and no script files: the shell
  only reads commands from standard input.