"""
Entry point for running the crowd safety analyzer as a module.

Usage:
    python -m crowd_safety FRAMES [options]
"""

from .cli import main

if __name__ == "__main__":
    main()
