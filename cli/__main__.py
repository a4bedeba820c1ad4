"""
Entry point for running audition-match administration as a module.

Usage:
    python -m cli affiliations add rep@example.edu Veritones
    python -m cli delay set --baseline 60000 --range 120000
    python -m cli feed
    python -m cli reset
"""

from .commands import main

if __name__ == "__main__":
    main()
