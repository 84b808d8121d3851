"""A small interactive shell with directory loops, if/else, sequences, pipelines and redirections."""

__version__ = "0.1.0"