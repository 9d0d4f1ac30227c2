# coding=utf-8
#

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os

from pegboot.pyutils import AutoDict
from pegboot.error import PegBootPathNotFoundError, PegBootProcessFailed
from pegboot.pathutils import DirStack, unfoldPath, getNativePath, writeFileAtomic
from pegboot.utils import runCmd, cmdLineToStr
from pegboot import log

def _decode(data):
    if not data:
        return ''
    return data.decode('utf-8', 'replace')

class BuildContext(object):
    """
    State of one run: the cache of evaluated targets, the stack of working
    directories and the way to run external commands.
    Nothing from here is saved between runs.
    """

    # pylint: disable = too-many-instance-attributes

    def __init__(self, rootdir = None, conf = None, targets = None, runner = None):
        """
        Param 'targets' is a map of target identifiers to Target objects,
        the registry of the project is used by default. Param 'runner' is a
        function with the same signature as pegboot.utils.runCmd.
        """

        if targets is None:
            from pegboot.targets import TARGETS
            targets = TARGETS

        cwd = os.getcwd()
        self.rootdir = unfoldPath(rootdir if rootdir else cwd, cwd)
        self.conf = conf if conf is not None else AutoDict()
        self.targets = targets
        self.cache = {}
        self.evaluating = []
        self.dirs = DirStack()
        self.invocations = 0
        self.env = None
        self._runner = runner if runner is not None else runCmd

    def resetCache(self):
        """ Forget all evaluated targets """
        self.cache.clear()

    def getTarget(self, targetId):
        """ Get Target object by identifier """
        return self.targets[targetId]

    def path(self, relpath):
        """ Get absolute path from a POSIX path relative to the project root """
        if not relpath:
            return relpath
        return os.path.join(self.rootdir, getNativePath(relpath))

    def chdir(self, dirpath):
        """
        Context manager to run some actions inside of dirpath
        """
        return self.dirs.scope(dirpath)

    def tool(self, name, default = None):
        """ Get executable of a tool from the config """
        return self.conf.get(name, default) or default

    def command(self, name, *args, inputFile = None, outputFile = None):
        """
        Run external command. Content of the inputFile is streamed into stdin
        of the command. If outputFile is set then stdout of the command is
        written into this file and its stderr is passed through, otherwise
        the output of the command is shown.
        Any problem raises an exception: there is no retry.
        """

        name = getNativePath(name)
        inputFile = getNativePath(inputFile)
        outputFile = getNativePath(outputFile)

        cmdLine = [name] + [str(x) for x in args]
        msg = cmdLineToStr(cmdLine)
        if inputFile:
            msg += ' < %s' % inputFile
        if outputFile:
            msg += ' > %s' % outputFile
        log.printStep(msg)

        inputData = None
        if inputFile:
            try:
                with open(inputFile, 'rb') as file:
                    inputData = file.read()
            except OSError as ex:
                raise PegBootPathNotFoundError(inputFile,
                    "Cannot read input file %r: %s" % (inputFile, ex)) from ex

        self.invocations += 1

        if outputFile:
            result = self._runner(cmdLine, env = self.env, captureOutput = True,
                                  passStdErr = True, inputData = inputData,
                                  text = False)
            if result.exitcode != 0:
                raise PegBootProcessFailed(cmdLine, result.exitcode)
            writeFileAtomic(outputFile, result.stdout or b'')
            return

        result = self._runner(cmdLine, env = self.env, stdErrToOut = True,
                              inputData = inputData, text = False)
        output = _decode(result.stdout)
        if output:
            log.info(output.rstrip('\n'))
        if result.exitcode != 0:
            raise PegBootProcessFailed(cmdLine, result.exitcode, output)
