# coding=utf-8
#

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import sys
import traceback

verbose = 0

class PegBootError(Exception):
    """Base class for all PegBoot errors"""

    def __init__(self, msg = None, ex = None):
        if msg is None:
            msg = ''
        super().__init__(msg)
        self.msg = msg
        self.stack = []
        if ex:
            if not msg:
                self.msg = str(ex)
            if isinstance(ex, PegBootError):
                self.stack = ex.stack
            else:
                self.stack = traceback.extract_tb(sys.exc_info()[2])
        self.stack += traceback.extract_stack()[:-1]
        self.verbose_msg = ''.join(traceback.format_list(self.stack))
        self.fullmsg = self.verbose_msg + self.msg

    def __str__(self):
        return str(self.msg)

class PegBootLogicError(PegBootError):
    """Some logic/programming error"""

class PegBootConfError(PegBootError):
    """Invalid project config file error"""

    def __init__(self, msg = None, ex = None, confpath = None):
        if msg is None:
            msg = ''
        if confpath and msg:
            _msg = "Error in the file %r:" % confpath
            for line in msg.splitlines():
                _msg += "\n  %s" % line
            msg = _msg
        self.confpath = confpath
        super().__init__(msg, ex)

class PegBootPathNotFoundError(PegBootError):
    """ Path doesn't exist """

    def __init__(self, path, msg = None):
        self.path = path
        if not msg:
            msg = "Path %r doesn't exist." % path
        super().__init__(msg)

class PegBootDirNotFoundError(PegBootPathNotFoundError):
    """ Directory doesn't exist or can't be entered """

    def __init__(self, path, msg = None):
        if not msg:
            msg = "Directory %r doesn't exist." % path
        super().__init__(path, msg)

class PegBootUnknownTargetError(PegBootError):
    """ Target name is not known """

    def __init__(self, name, msg = None):
        self.name = name
        if not msg:
            msg = "Unknown target %r." % name
        super().__init__(msg)

class PegBootProcessError(PegBootError):
    """ Process could not be started or fed """

    def __init__(self, cmd, msg = None, ex = None):
        self.cmd = cmd
        if not msg:
            msg = "Command %r could not be run" % (cmd, )
            if ex is not None:
                msg += ": %s" % ex
            else:
                msg += '.'
        super().__init__(msg, ex)

class PegBootProcessFailed(PegBootError):
    """ Process failed with exitcode """

    def __init__(self, cmd, exitcode, output = None, msg = None):
        self.cmd = cmd
        self.exitcode = exitcode
        self.output = output
        if not msg:
            msg = "Command %r failed with exit code %d." % (cmd, exitcode)
        super().__init__(msg)

class PegBootProcessTimeoutExpired(PegBootError):
    """ Raised when a timeout expires while waiting for a process """

    def __init__(self, cmd, timeout, output, msg = None):
        self.cmd = cmd
        self.timeout = timeout
        self.output = output

        if not msg:
            msg = "Timeout (%d sec.) for command expired." % timeout
            msg += "\nCommand: %r" % (cmd, )
            if output:
                msg += '\nCaptured output:\n'
                msg += output
        super().__init__(msg)
