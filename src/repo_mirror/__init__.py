#!/usr/bin/env python3

"""
Git Repository Mirror System

Bulk-mirrors a list of source git repositories into a target group,
with full mirror clones or incremental updates and force-push to the
destination.
"""

__version__ = "1.0.0"
__author__ = "Repo Mirror Project"
