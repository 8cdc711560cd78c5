"""
Entry point for running the notification pipeline as a module.

Usage:
    python -m frigate_notify --events -
"""

from .cli import main

if __name__ == "__main__":
    main()
