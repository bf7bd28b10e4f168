"""Entry point for `python -m memoryctl`."""

from memoryctl.cli.commands import app

if __name__ == "__main__":
    app()
