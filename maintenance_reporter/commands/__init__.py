"""CLI commands. Each module exposes one click command registered in cli.py."""
