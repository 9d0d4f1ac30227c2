# coding=utf-8
#

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import time

from pegboot.constants import BUILDINFO_FILENAME
from pegboot.pyutils import struct
from pegboot.error import PegBootError
from pegboot.utils import runCmd
from pegboot import log

GIT_TIMEOUT = 60

BuildInfo = struct('BuildInfo', 'version, buildtime, commit, istagged')

TEMPLATE = """\
// Code Generated by "pegboot buildinfo"  DO NOT EDIT.
package main

const (VERSION="{version}";BUILDTIME="{buildtime}";COMMIT="{commit}";IS_TAGGED={istagged})"""

def _git(ctx, *args):
    """
    Run git and return its output or None on any problem.
    Problems are only logged.
    """

    cmdLine = ['git'] + list(args)
    try:
        result = runCmd(cmdLine, cwd = ctx.rootdir, captureOutput = True,
                        timeout = GIT_TIMEOUT)
    except PegBootError as ex:
        log.warn('buildinfo: error: %s', ex)
        return None

    if result.exitcode != 0:
        err = (result.stderr or '').strip()
        log.warn('buildinfo: error: %r exited with code %d%s', ' '.join(cmdLine),
                 result.exitcode, (': ' + err) if err else '')
        return None

    return result.stdout or ''

def collect(ctx):
    """
    Gather version info from git. Fallback values are used for all
    things that can't be obtained.
    """

    info = BuildInfo(version = 'unknown', commit = '', istagged = False)

    # single newline can be in the output if there are no tags
    output = _git(ctx, 'tag', '--contains')
    if output is not None and len(output) > 1:
        info.istagged = True
        info.version = output.rstrip('\n')
    elif output is not None:
        output = _git(ctx, 'tag', '--merged', '--sort=v:refname')
        if output is not None and len(output) > 1:
            tags = output.rstrip('\n').split('\n')
            info.version = tags[-1]

    output = _git(ctx, 'rev-parse', 'HEAD')
    if output is not None:
        info.commit = output.rstrip('\n')

    info.buildtime = time.strftime('%Y-%m-%dT%H:%M:%S', time.gmtime())
    return info

def render(info):
    """ Make text of the buildinfo file """

    return TEMPLATE.format(
        version = info.version,
        buildtime = info.buildtime,
        commit = info.commit,
        istagged = 'true' if info.istagged else 'false',
    )

def generate(ctx):
    """
    Write file with build info into the project root.
    Returns True if the file was written.
    """

    info = collect(ctx)
    path = ctx.path(BUILDINFO_FILENAME)
    try:
        with open(path, 'w', encoding = 'utf-8') as file:
            file.write(render(info))
    except OSError as ex:
        log.error('buildinfo: open %s: fatal: %s', BUILDINFO_FILENAME, ex)
        return False

    log.info('buildinfo: %s is written (version %s)', BUILDINFO_FILENAME, info.version)
    return True
