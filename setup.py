#!/usr/bin/env python3
"""
setup.py shim for tools that still invoke it directly.

Package metadata, dependencies and the 'osdctl' console script live in pyproject.toml.
"""

from setuptools import setup

if __name__ == "__main__":
    setup()
