# -*- coding: utf-8 -*-

"""Configuration of the logs, for applications using pledge.

The library itself only sends log records to the loggers named after its
modules (``pledge.deferred``, ``pledge.combinators``, ...). An application
can use the ``Context`` class to display these records on the console and to
write them in a log file, rotated every day.

Records emitted while a ``DiagnosticScope`` is active are tagged with the
scope's name.
"""

import logging
import logging.handlers
import os.path
import sys

from . import config
from . import path as pledge_path
from ..context import ScopeFilter

_logger = logging.getLogger(__name__)

DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
STRING_FORMAT = ('%(asctime)s %(levelname)-7s %(name)s [%(scope)s] - '
                 '%(message)s')


def _support_color_output(stream):
    """Guess if the stream supports color term code.

    Returns:
        boolean: True if we are sure the stream supports color; False otherwise
    """
    if hasattr(stream, 'isatty') and stream.isatty():
        return not sys.platform.startswith('win')
    return False


class ColoredFormatter(logging.Formatter):
    """Formatter who display colored messages using ANSI escape codes."""

    _colors = {
        'RESET': '\033[0m',
        'DEBUG': '\033[34m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[31m',
        'NAME': '\033[36m',
        'DATE': '\033[30;1m',
        'EXCEPTION_NAME': '\033[31;1m',
    }

    def _colorize(self, msg, color):
        return self._colors.get(color, '') + msg + self._colors.get('RESET')

    def formatTime(self, record, datefmt=None):
        result = logging.Formatter.formatTime(self, record, datefmt)
        return self._colorize(result, 'DATE')

    def formatException(self, ei):
        msg = logging.Formatter.formatException(self, ei)
        lines = msg.split('\n')
        exc_name, sep, exc_msg = lines[-1].partition(':')
        lines[-1] = self._colorize(exc_name, 'EXCEPTION_NAME') + sep + exc_msg
        return '\n'.join(lines)

    def format(self, record):
        # The record is shared with the other handlers: it must be restored.
        name, levelname = record.name, record.levelname
        record.name = self._colorize(name, 'NAME')
        record.levelname = self._colorize(levelname, levelname)
        try:
            return logging.Formatter.format(self, record)
        finally:
            record.name, record.levelname = name, levelname


def _get_file_handler(filename, nb_max_files=7):
    """Open a log file, rotated every day at midnight.

    Args:
        filename (str): name of the log file. Ex: 'pledge.log'
        nb_max_files (int): number of old log files kept.
    Returns:
        FileHandler: a handler writing in the log file, or None if the file
            creation has failed.
    """
    log_path = os.path.join(pledge_path.get_log_dir(), filename)
    try:
        return logging.handlers.TimedRotatingFileHandler(
            log_path, when='midnight', backupCount=nb_max_files)
    except (OSError, IOError):
        _logger.warning('Unable to create the log file %s', log_path,
                        exc_info=True)
        return None


class Context(object):
    """Context class used to open and close log handlers."""

    def __init__(self, filename='pledge.log', stream=None):
        """Prepare a new log context.

        Args:
            filename (str, optional): name of the log file. If None, logs are
                not written on disk.
            stream (optional): stream used for the console output. Default to
                `sys.stderr`.
        """
        self._filename = filename
        self._stream = stream
        self._handlers = []

    def __enter__(self):
        """Install the handlers and apply the log settings."""
        logging.captureWarnings(True)
        root_logger = logging.getLogger()

        formatter = logging.Formatter(fmt=STRING_FORMAT, datefmt=DATE_FORMAT)
        scope_filter = ScopeFilter()

        stream_handler = logging.StreamHandler(self._stream)
        if _support_color_output(stream_handler.stream):
            stream_handler.setFormatter(
                ColoredFormatter(fmt=STRING_FORMAT, datefmt=DATE_FORMAT))
        else:
            stream_handler.setFormatter(formatter)
        self._handlers.append(stream_handler)

        if self._filename:
            file_handler = _get_file_handler(self._filename)
            if file_handler:
                file_handler.setFormatter(formatter)
                self._handlers.append(file_handler)

        for handler in self._handlers:
            handler.addFilter(scope_filter)
            root_logger.addHandler(handler)

        set_debug_mode(config.get('debug_mode'))
        set_logs_level(config.get('log_levels'))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Remove and close the handlers opened by this context."""
        _logger.debug('Stop logger ...')
        root_logger = logging.getLogger()
        for handler in self._handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers = []
        logging.captureWarnings(False)


def set_logs_level(levels):
    """Configure a fine-grained log levels for the different modules.

    Args:
        levels (dict): associates a logger name and a log level. A log level
            can be a number or a str representing one of the logging levels
            (DEBUG, WARNING, ...). Invalids values are ignored.

    Example:

        >>> # Accept DEBUG logs only for the combinators.
        >>> set_logs_level({'pledge':'info', 'pledge.combinators': 'debug'})
    """
    for (module, level) in levels.items():
        try:
            if isinstance(level, str):
                level = int(level) if level.isdigit() else level.upper()
            logging.getLogger(module).setLevel(level)
        except (TypeError, ValueError):
            _logger.warning('Invalid log level "%s" for logger "%s". '
                            'Will be ignored.', level, module)


def set_debug_mode(debug):
    """Set, or unset the debug log level.

    Only the pledge loggers are set to DEBUG: other libraries keep the INFO
    level. They can be changed with ``set_logs_level()``.

    Args:
        debug (boolean): if True, the pledge log level is set to DEBUG.
            If False, it's set to INFO.
    """
    if debug:
        logging.getLogger().setLevel(logging.INFO)
        logging.getLogger('pledge').setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.WARNING)
        logging.getLogger('pledge').setLevel(logging.INFO)


def reset():
    """Reset the root logger (remove handlers and filters)."""
    logger = logging.getLogger()

    for h in logger.handlers[:]:
        logger.removeHandler(h)
    for f in logger.filters[:]:
        logger.removeFilter(f)
