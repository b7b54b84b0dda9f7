#!/usr/bin/env python3

"""
Console script for repo-mirror.

Installed as the ``repo-mirror`` command; reads the repository list and
target group from the command line and hands off to ``main.main``.
"""

import sys


def main():
    """Run repo-mirror and return its exit status."""
    from .main import main as main_func
    return main_func()

if __name__ == "__main__":
    sys.exit(main())
