# coding=utf-8
#

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.

 Decision whether a target is up to date. Only modification times of
 files are compared, there are no content hashes and nothing is stored
 between runs.
"""

import os

from pegboot.deps import FilePath, TargetRef
from pegboot.error import (
    PegBootPathNotFoundError, PegBootLogicError, PegBootUnknownTargetError
)
from pegboot import log

def _mtime(path):
    try:
        return os.stat(path).st_mtime
    except FileNotFoundError:
        return None

def _depMTime(ctx, path):
    try:
        return os.stat(ctx.path(path)).st_mtime
    except OSError as ex:
        raise PegBootPathNotFoundError(path,
            "Dependency %r doesn't exist: %s" % (path, ex)) from ex

def _resolveRef(ctx, targetId):
    """
    Get result for a referenced target from the cache or evaluate it.
    """

    cached = ctx.cache.get(targetId)
    if cached is not None:
        log.info('%s is done', _nameOf(ctx, targetId))
        return cached

    result = evaluateById(ctx, targetId)
    log.info('%s', _nameOf(ctx, targetId))
    return result

def _nameOf(ctx, targetId):
    target = ctx.targets.get(targetId)
    return target.name if target is not None else str(targetId)

def isUpToDate(ctx, target):
    """
    Check output and dependencies of the target without running its action.
    Referenced targets are evaluated (and so can be rebuilt) here.
    All dependencies are always visited, even if the result is already
    known, so that every reachable target gets into the cache.
    """

    # target without output is never up to date, its action always runs
    output = ctx.path(target.output)
    outputMTime = _mtime(output) if output else None
    result = outputMTime is not None

    for dep in target.deps:
        if isinstance(dep, FilePath):
            depMTime = _depMTime(ctx, dep.path)
            if outputMTime is None:
                result = False
            elif depMTime > outputMTime:
                log.debug('%r is newer than %r', dep.path, target.output)
                result = False
        elif isinstance(dep, TargetRef):
            result = _resolveRef(ctx, dep.targetId) and result
        else:
            raise PegBootLogicError('Unknown type of dependency %r in target %r'
                                    % (dep, target.name))

    return result

def evaluate(ctx, target):
    """
    Bring the target up to date.
    Returns True if the target was already up to date and False if its
    action was run.
    """

    targetId = target.id
    cached = ctx.cache.get(targetId)
    if cached is not None:
        return cached

    if targetId in ctx.evaluating:
        chain = ' -> '.join(_nameOf(ctx, x) for x in ctx.evaluating + [targetId])
        raise PegBootLogicError('Dependency cycle: %s' % chain)

    ctx.evaluating.append(targetId)
    try:
        result = isUpToDate(ctx, target)
        if not result:
            log.debug('target %r is stale', target.name)
            target.run(ctx)
    finally:
        ctx.evaluating.pop()

    ctx.cache[targetId] = result
    return result

def evaluateById(ctx, targetId):
    """ Find target by identifier and evaluate it """

    try:
        target = ctx.getTarget(targetId)
    except KeyError:
        raise PegBootUnknownTargetError(str(targetId)) from None
    return evaluate(ctx, target)
