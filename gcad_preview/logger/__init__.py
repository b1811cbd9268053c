"""
Logger module for gcad-preview

This module provides a flexible logging interface that allows users to
drop in their own logger implementations.

Usage:
    from gcad_preview.logger import Logger, ConsoleLogger

    logger = ConsoleLogger()
    logger.info("Panel created", view_type="toolpath")

    # Or implement your own
    class MyCustomLogger(Logger):
        def info(self, message: str, **kwargs):
            pass
"""

import logging

from gcad_preview.logger.interface import Logger
from gcad_preview.logger.console_logger import ConsoleLogger

# Shared logger instance for modules that just need basic console logging
session_logger: Logger = ConsoleLogger(level=logging.INFO)

__all__ = [
    "Logger",
    "ConsoleLogger",
    "session_logger",
]
