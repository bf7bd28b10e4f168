"""Standalone runner: python -m memoryctl.simulation NAME ITERATIONS."""

import sys

from memoryctl.cli.commands import app

if __name__ == "__main__":
    app(args=["simulate", *sys.argv[1:]], prog_name="python -m memoryctl.simulation")
