# coding=utf-8
#

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

from os import path
from importlib import metadata

from pegboot.constants import APPNAME, CAP_APPNAME
from pegboot.cmd import Command as _Command

VERSION_FILE_PATH = path.join(path.dirname(path.abspath(__file__)), 'version')

def fromFile(filepath = VERSION_FILE_PATH):
    """
    Read version from the file that is shipped inside the package.
    The first line that is not empty and not a comment is the version.
    """

    with open(filepath, 'r', encoding = 'utf-8') as file:
        for line in file:
            line = line.strip()
            if line and not line.startswith('#'):
                return line

    raise RuntimeError('Version in file %r was not found' % filepath)

def current():
    """
    Get version of the installed distribution. The version file is used
    when pegboot is run from the source tree without installing.
    """

    try:
        return metadata.version(APPNAME)
    except metadata.PackageNotFoundError:
        return fromFile()

class Command(_Command):
    """
    Print version of the program.
    It's implementation of command 'version'.
    """

    def _run(self, cliArgs):

        msg = "%s version %s" % (CAP_APPNAME, current())
        if cliArgs.get('verbose', 0) >= 1:
            import platform as _platform
            msg += '\nPython version: %s' % _platform.python_version()
            msg += '\nInstalled from: %s' % path.dirname(path.abspath(__file__))

        self._info(msg)
        return 0
