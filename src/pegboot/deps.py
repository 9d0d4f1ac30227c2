# coding=utf-8
#

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.

 Dependencies of build targets. A dependency is either a plain file
 (FilePath) compared by modification time or a reference to another
 target (TargetRef) that is evaluated recursively.
"""

from enum import Enum

from pegboot.pyutils import stringtype, struct
from pegboot.error import PegBootLogicError

FilePath = struct('FilePath', 'path')
TargetRef = struct('TargetRef', 'targetId')

def toDeps(*items):
    """
    Make tuple of dependencies from items. A string is a file path in
    POSIX form, a member of an Enum is an identifier of a target.
    Objects of FilePath and TargetRef are taken as is.
    """

    result = []
    for item in items:
        if isinstance(item, (FilePath, TargetRef)):
            dep = item
        elif isinstance(item, stringtype):
            if not item:
                raise PegBootLogicError('Empty file path in dependencies')
            dep = FilePath(item)
        elif isinstance(item, Enum):
            dep = TargetRef(item)
        else:
            raise PegBootLogicError('Invalid dependency: %r' % (item, ))
        result.append(dep)

    return tuple(result)

def fileDeps(deps):
    """ Get only file paths from dependencies """
    return [x.path for x in deps if isinstance(x, FilePath)]

def targetDeps(deps):
    """ Get only target identifiers from dependencies """
    return [x.targetId for x in deps if isinstance(x, TargetRef)]
