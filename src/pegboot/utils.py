# coding=utf-8
#

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
import sys
import re
import signal
import subprocess
import threading

from pegboot.pyutils import stringtype, struct
from pegboot.error import PegBootProcessError, PegBootProcessTimeoutExpired

_RE_TOLIST = re.compile(r"""((?:[^\s"']|"[^"]*"|'[^']*')+)""", re.ASCII)
_RE_PLATFORM_VER = re.compile(r'\d+$')

def platform():
    """
    Return current system platform. It is always 'windows' for MS Windows.
    """

    result = sys.platform
    if result == 'powerpc':
        return 'darwin' # pragma: no cover
    if result.startswith('win32') or result in ('cygwin', 'msys'):
        return 'windows' # pragma: no cover
    return _RE_PLATFORM_VER.split(result)[0]

PLATFORM = platform()

def stripQuotes(val):
    """
    Strip quotes ' or " from the begin and the end of a string but do it only
    if they are the same on both sides.
    """

    if not val or len(val) < 2:
        return val

    first = val[0]
    last = val[-1]
    if first == last and first in ("'", '"'):
        return val[1:-1]

    return val

def toList(val):
    """
    Converts a string argument to a list by splitting it by spaces.
    Quoted substrings with spaces are preserved.
    Returns the object if not a string
    """
    if not isinstance(val, stringtype):
        return val

    if not ('"' in val or "'" in val): # optimization
        return val.split()

    return [stripQuotes(x) for x in _RE_TOLIST.split(val)[1::2]]

def envValToBool(rawVal):
    """
    Return env val as native bool value.
    Returns False if not recognized.
    """

    result = False
    if rawVal:
        try:
            # value from os.environ is a string but it may be a digit
            result = bool(int(rawVal))
        except ValueError:
            result = rawVal in ('true', 'True', 'yes')

    return result

def cmdLineToStr(cmdLine):
    """
    Return command line as one string suitable for logs
    """

    return ' '.join(cmdLine)

ProcCmdResult = struct('ProcCmdResult', 'exitcode, stdout, stderr')

class ProcCmd(object):
    """
    Class to run external command in a subprocess
    """

    # pylint: disable = too-many-arguments
    def __init__(self, cmdLine, captureOutput = False, stdErrToOut = False,
                 passStdErr = False, text = True):
        """
        Param cmdLine is a list of arguments, a shell is never used.
        If captureOutput is True then stdout and stderr are captured
        separately, but with passStdErr stderr goes to the stderr of this
        process as is. If stdErrToOut is True then stderr is merged into the
        captured stdout. Parameter text selects str or bytes for the data
        passed to and from the process.
        """

        self._cmdLine = list(cmdLine)
        self._proc = None
        self._timeoutExpired = False
        self._popenArgs = {
            'stdin' : None,
            'stdout' : None,
            'stderr' : None,
            'universal_newlines' : text,
        }

        if captureOutput:
            self._popenArgs['stdout'] = subprocess.PIPE
            if not passStdErr:
                self._popenArgs['stderr'] = subprocess.PIPE

        if stdErrToOut:
            self._popenArgs['stdout'] = subprocess.PIPE
            self._popenArgs['stderr'] = subprocess.STDOUT

        # Use 'start_new_session' to change the process(forked) group id to itself
        # so os.killpg with proc.pid can be used.
        # This parameter does nothing on Windows.
        self._popenArgs['start_new_session'] = True

    def _killProc(self):
        proc = self._proc
        if hasattr(os, 'killpg'):
            # kill all processes of the group, not only the direct child
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()
        self._timeoutExpired = True

    def run(self, cwd = None, env = None, timeout = None, inputData = None):
        """
        Run command. Param inputData is written into stdin of the process
        while its output is read.
        Returns ProcCmdResult.
        """

        kwargs = self._popenArgs
        kwargs.update({
            'cwd' : cwd,
            'env' : env,
        })
        if inputData is not None:
            kwargs['stdin'] = subprocess.PIPE

        timer = None
        try:
            self._proc = subprocess.Popen(self._cmdLine, **kwargs)

            if timeout is not None:
                self._timeoutExpired = False
                timer = threading.Timer(timeout, self._killProc)
                # allow entire program to exit on unexpected exception like KeyboardInterrupt
                timer.daemon = True
                timer.start()

            # Popen.communicate feeds stdin and drains the output pipes
            # concurrently so there is no deadlock on full pipe buffers.
            stdout, stderr = self._proc.communicate(input = inputData)
            result = ProcCmdResult(self._proc.returncode, stdout, stderr)

            if self._timeoutExpired:
                raise PegBootProcessTimeoutExpired(self._cmdLine, timeout,
                                                   result.stdout)

        except (OSError, ValueError, subprocess.SubprocessError) as ex:
            raise PegBootProcessError(self._cmdLine, ex = ex) from ex
        finally:
            if timer:
                timer.cancel()

            # release Popen object
            self._proc = None

        return result

def runCmd(cmdLine, cwd = None, env = None, timeout = None, captureOutput = False,
           stdErrToOut = False, passStdErr = False, inputData = None, text = True):
    """
    Run external command in a subprocess.
    See ProcCmd for the params.
    Returns ProcCmdResult.
    """

    # pylint: disable = too-many-arguments

    procCmd = ProcCmd(cmdLine, captureOutput, stdErrToOut, passStdErr, text)
    return procCmd.run(cwd, env, timeout, inputData)
