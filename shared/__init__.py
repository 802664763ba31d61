"""
elfsize Shared Module
=====================

Configuration, logging, console and fixed-width arithmetic helpers
used by the elfsize calculator and its CLI.
"""

from shared.config import AppConfig, get_config

__all__ = ["AppConfig", "get_config"]
