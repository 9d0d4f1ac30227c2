# coding=utf-8
#

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
import sys

from pegboot.constants import (
    EXITCODE_FATAL, EXITCODE_USAGE, EXITCODE_INTERRUPTED,
)
from pegboot.cmd import Command as _Command
from pegboot import log, error

def _special(name):
    from pegboot import targets, buildinfo

    handlers = {
        'bench' : targets.bench,
        'clean' : targets.clean,
        'buildinfo' : buildinfo.generate,
    }
    return handlers[name]

class ListCommand(_Command):
    """
    Print all targets.
    It's implementation of command 'list'.
    """

    COLOR = 'NORMAL'

    def _run(self, cliArgs):
        from pegboot import cli

        for cmd in cli.config.commands:
            if cmd.kind == 'indy':
                continue
            self._info('  %-26s %s' % (cmd.name, cmd.description))
        return 0

class TargetCommand(_Command):
    """
    Build selected target or run special command like 'clean'.
    """

    COLOR = 'GREEN'

    def __init__(self, name, runner = None):
        super().__init__()
        self.name = name
        self._runner = runner

    def _makeContext(self, cliArgs):
        from pegboot.context import BuildContext
        from pegboot.pathutils import unfoldPath
        from pegboot import config

        cwd = os.getcwd()
        rootdir = unfoldPath(cliArgs.get('directory') or cwd, cwd)
        conf = config.load(rootdir)
        return BuildContext(rootdir, conf, runner = self._runner)

    def _run(self, cliArgs):
        from pegboot import cli
        from pegboot.staleness import evaluateById
        from pegboot.targets import findTargetId

        ctx = self._makeContext(cliArgs)
        kind = cli.getCommand(self.name).kind

        with ctx.chdir(ctx.rootdir):
            if kind == 'special':
                _special(self.name)(ctx)
            else:
                targetId = findTargetId(self.name)
                if targetId is None:
                    raise error.PegBootUnknownTargetError(self.name)
                upToDate = evaluateById(ctx, targetId)
                if upToDate:
                    self._info("'%s' is up to date" % self.name)

        self._info("'%s' finished successfully (%d command(s) run)"
                   % (self.name, ctx.invocations))
        return 0

_indyCmd = {
    'version' : 'pegboot.version',
}

def makeCommand(cmdName, runner = None):
    """ Make object of a command for a parsed CLI command name """

    if cmdName == 'list':
        return ListCommand()
    if cmdName in _indyCmd:
        from importlib import import_module
        return import_module(_indyCmd[cmdName]).Command()
    return TargetCommand(cmdName, runner)

def run(argv = None, runner = None):
    """
    Parse CLI and run selected target.
    Returns exit code.
    """

    from pegboot import cli

    if argv is None:
        argv = sys.argv

    cmd = None
    try:
        cmd = cli.parseAll(argv)
        verbose = cmd.args.get('verbose') or 0
        error.verbose = verbose
        log.setVerbose(verbose)
        return makeCommand(cmd.name, runner).run(cmd.args)

    except error.PegBootUnknownTargetError as ex:
        log.error(ex.msg)
        return EXITCODE_USAGE
    except error.PegBootError as ex:
        if error.verbose > 1:
            log.pprint('RED', ex.fullmsg)
        log.error(ex.msg)
        return EXITCODE_FATAL
    except KeyboardInterrupt:
        log.pprint('RED', 'Interrupted')
        return EXITCODE_INTERRUPTED

def main():
    """ Entry point of the console script """
    sys.exit(run())
