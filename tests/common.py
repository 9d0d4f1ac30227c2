# coding=utf-8
#

# pylint: skip-file

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
import sys
import time
from enum import Enum

from pegboot.pyutils import AutoDict
from pegboot.utils import ProcCmdResult
from pegboot.targets import Target
from pegboot.context import BuildContext

joinpath = os.path.join

PYTHON_EXE = sys.executable if sys.executable else 'python3'

def writeFile(path, content = 'trash', mtime = None):
    dirpath = os.path.dirname(path)
    if dirpath and not os.path.isdir(dirpath):
        os.makedirs(dirpath)
    with open(path, 'w') as file:
        file.write(content)
    if mtime is not None:
        os.utime(path, (mtime, mtime))

def touch(path, mtime):
    os.utime(path, (mtime, mtime))

def makeFiles(rootdir, paths, mtime = None):
    if mtime is None:
        mtime = time.time() - 1000
    for path in paths:
        writeFile(joinpath(rootdir, *path.split('/')), mtime = mtime)

class FakeRunner(object):
    """
    Replacement of pegboot.utils.runCmd that remembers all calls and
    creates output files of the build commands
    """

    def __init__(self, failOn = None):
        self.calls = []
        self.failOn = failOn

    def __call__(self, cmdLine, **kwargs):
        self.calls.append((os.getcwd(), list(cmdLine), kwargs))
        exitcode = 0
        if self.failOn and self.failOn(cmdLine):
            exitcode = 1

        if exitcode == 0 and '-o' in cmdLine:
            # 'go build -o name' makes binary
            writeFile(cmdLine[cmdLine.index('-o') + 1])
        elif exitcode == 0 and list(cmdLine[1:2]) == ['build']:
            # 'go build' makes binary with name of the module
            isBootstrap = os.path.basename(os.getcwd()) == 'bootstrap'
            writeFile('bootstrap' if isBootstrap else 'peg')
        elif exitcode == 0 and cmdLine[0].endswith('peg') and '-switch' in cmdLine:
            # peg makes 'name.peg.go' from 'name.peg'
            writeFile(cmdLine[-1] + '.go')

        if kwargs.get('captureOutput'):
            return ProcCmdResult(exitcode, b'package main\n', b'')
        return ProcCmdResult(exitcode, b'', None)

    @property
    def cmdLines(self):
        return [x[1] for x in self.calls]

class NodeId(Enum):
    A = 'a'
    B = 'b'
    C = 'c'
    D = 'd'
    E = 'e'

def makeGraph(specs):
    """
    Make map of targets from list of (targetId, output, deps).
    Every action writes the output of its target and counts calls.
    Returns the map and the counter of calls.
    """

    counter = AutoDict()

    def makeAction(target):
        def action(ctx):
            counter[target] = counter.get(target, 0) + 1
            output = ctx.path(ctx.getTarget(target).output)
            if output:
                writeFile(output, content = 'new')
        return action

    targets = {}
    for targetId, output, deps in specs:
        targets[targetId] = Target(targetId, output, deps, makeAction(targetId))
    return targets, counter

def makeContext(rootdir, targets = None, runner = None, conf = None):
    return BuildContext(rootdir, conf = conf, targets = targets, runner = runner)

# source files of the peg project
PROJECT_SOURCES = [
    'bootstrap/main.go',
    'tree/peg.go',
    'cmd/peg-bootstrap/main.go',
    'cmd/peg-bootstrap/bootstrap.peg',
    'cmd/peg-bootstrap/peg.bootstrap.peg',
    'peg.peg',
    'main.go',
    'grammars/c/c.peg',
    'grammars/calculator/calculator.peg',
    'grammars/calculator_ast/calculator.peg',
    'grammars/fexl/fexl.peg',
    'grammars/java/java_1_7.peg',
    'grammars/long_test/long.peg',
]

# number of commands to build peg from scratch
CHAIN_COMMANDS = 15
