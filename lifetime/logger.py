#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Notice and diagnostics logger for the demonstrations

Console only by default. A daily log file under ~/.lifetime_demo/logs is
attached when debug logging is switched on.
"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional
from PySide6.QtCore import QObject, Signal


LOG_DIRECTORY = Path.home() / '.lifetime_demo' / 'logs'

CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(threadName)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'


class AppLogger(QObject):
    """Process-wide notice sink; notices are also published as a Qt signal"""

    log_message = Signal(str, str)  # level, message

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        super().__init__()
        self._initialized = True
        self._debug_enabled = False
        self._file_handler: Optional[logging.FileHandler] = None

        self.logger = logging.getLogger('LifetimeDemo')
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False
        self.logger.handlers.clear()

        self._console_handler = logging.StreamHandler(sys.stdout)
        self._console_handler.setLevel(logging.INFO)
        self._console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
        self.logger.addHandler(self._console_handler)

    def enable_debug(self, enabled: bool = True, log_directory: Optional[Path] = None):
        """
        Show debug output on the console and mirror everything to a log file

        Disabling detaches and closes the file handler again.
        """
        self._debug_enabled = enabled
        if enabled:
            self._console_handler.setLevel(logging.DEBUG)
            self._attach_file_handler(log_directory or LOG_DIRECTORY)
            self.debug("Debug logging enabled")
        else:
            self._console_handler.setLevel(logging.INFO)
            self._detach_file_handler()

    def _attach_file_handler(self, directory: Path):
        if self._file_handler is not None:
            return
        try:
            directory.mkdir(parents=True, exist_ok=True)
            log_file = directory / f"lifetime_{datetime.now().strftime('%Y%m%d')}.log"
            handler = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            self.logger.warning(f"File logging unavailable: {e}")
            return

        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(FILE_FORMAT))
        self.logger.addHandler(handler)
        self._file_handler = handler

    def _detach_file_handler(self):
        if self._file_handler is None:
            return
        self.logger.removeHandler(self._file_handler)
        self._file_handler.close()
        self._file_handler = None

    def debug(self, message: str):
        self.logger.debug(message)
        if self._debug_enabled:
            self.log_message.emit('DEBUG', message)

    def info(self, message: str):
        self.logger.info(message)
        self.log_message.emit('INFO', message)

    def error(self, message: str):
        self.logger.error(message)
        self.log_message.emit('ERROR', message)


# Global logger instance
logger = AppLogger()
