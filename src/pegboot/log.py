# coding=utf-8
#

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
import sys
import logging
from pegboot.constants import APPNAME, PLATFORM
from pegboot.utils import envValToBool

colorSettings = {
    'USE' : 1,
    'BOLD'  : '\x1b[01;1m',
    'RED'   : '\x1b[01;31m',
    'GREEN' : '\x1b[32m',
    'YELLOW': '\x1b[33m',
    'PINK'  : '\x1b[35m',
    'BLUE'  : '\x1b[01;34m',
    'CYAN'  : '\x1b[36m',
    'GREY'  : '\x1b[37m',
    'NORMAL': '\x1b[0m',
}

class _Colors(object):
    """
    Access to color escapes by attribute or by call.
    Every escape is an empty string while colors are disabled.
    """

    def __call__(self, name):
        if not colorSettings['USE']:
            return ''
        return colorSettings.get(name, '')

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        return self(name)

colors = _Colors()

_LEVEL_COLORS = {
    logging.DEBUG   : 'CYAN',
    logging.WARNING : 'YELLOW',
    logging.ERROR   : 'RED',
}

class ColorFormatter(logging.Formatter):
    """ Formatter that paints a message with color from 'c1' extra or by level """

    def __init__(self):
        super().__init__('%(message)s')

    def format(self, record):
        msg = super().format(record)
        c1 = getattr(record, 'c1', None)
        if c1 is None:
            c1 = colors(_LEVEL_COLORS.get(record.levelno, 'NORMAL'))
        if record.levelno == logging.DEBUG:
            msg = '%s: %s' % (getattr(record, 'zone', APPNAME), msg)
        if not c1:
            return msg
        return '%s%s%s' % (c1, msg, colors.NORMAL)

class _StreamHandler(logging.StreamHandler):
    """ Stream handler that writes warnings and errors into stderr """

    def emit(self, record):
        # streams are looked up on each call so that tests can replace them
        self.stream = sys.stderr if record.levelno >= logging.WARNING else sys.stdout
        super().emit(record)

def _initLogger():
    logger = logging.getLogger(APPNAME)
    if not logger.handlers:
        handler = _StreamHandler()
        handler.setFormatter(ColorFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(logging.INFO)
    return logger

_logger = _initLogger()
_verbose = 0

def debug(msg, *args, **kwargs):
    """ Log debug message. It's shown only in verbose mode. """
    _logger.debug(msg, *args, **kwargs)

def info(msg, *args, **kwargs):
    """ Log info message """
    _logger.info(msg, *args, **kwargs)

def warn(msg, *args, **kwargs):
    """ Log warning message """
    _logger.warning(msg, *args, **kwargs)

def error(msg, *args, **kwargs):
    """ Log error message """
    _logger.error(msg, *args, **kwargs)

def pprint(color, msg, **kwargs):
    """ Print message with selected color """
    extra = kwargs.pop('extra', {})
    extra['c1'] = colors(color)
    _logger.info(msg, extra = extra, **kwargs)

def enableColorsByCli(colorArg):
    """
    Set up log colors by arg from CLI
    """

    setting = {'yes' : 2, 'auto' : 1, 'no' : 0}[colorArg]
    if setting == 1:
        onTTY = os.environ.get('PEGBOOT_ON_TTY')
        if onTTY:
            onTTY = envValToBool(onTTY)
        else:
            onTTY = sys.stderr.isatty() or sys.stdout.isatty()
        if not onTTY:
            setting = 0

    if setting == 1:
        defaultTerm = 'dumb'
        if PLATFORM == 'windows':
            defaultTerm = ''
        if os.environ.get('TERM', defaultTerm) in ('dumb', 'emacs'):
            setting = 0

    colorSettings['USE'] = setting

def colorsEnabled():
    """ Return True if color output is enabled """
    return bool(colorSettings['USE'])

def verbose():
    """ Get current verbosity level """
    return _verbose

def setVerbose(value):
    """ Set verbosity level. Any level above zero turns on debug messages. """

    # pylint: disable = global-statement
    global _verbose
    _verbose = value or 0
    _logger.setLevel(logging.DEBUG if _verbose > 0 else logging.INFO)

def printStep(*args, **kwargs):
    """
    Log some step of a build
    """

    extra = kwargs.get('extra', {})
    if 'c1' not in extra:
        extra.update({ 'c1': colors.CYAN })
        kwargs.update({'extra' : extra})
    info(*args, **kwargs)

enableColorsByCli('auto')
