"""
KeyForge Shared Module
======================

Configuration, structured logging, console output, result models and
maths helpers used by the ``keyforge`` package and its CLI.
"""

from shared.config import KeyForgeConfig

__all__ = ["KeyForgeConfig"]
