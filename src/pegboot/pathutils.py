# coding=utf-8
#

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
from contextlib import contextmanager

from pegboot.constants import CWD
from pegboot.error import PegBootDirNotFoundError, PegBootError
from pegboot import log

_joinpath = os.path.join
_realpath = os.path.realpath
_isabs = os.path.isabs
_expanduser = os.path.expanduser

def unfoldPath(path, cwd = CWD):
    """
    Unfold path applying os.path.expanduser and joining 'path' with 'cwd' in
    the beginning if the 'path' is not absolute path.
    Returns real path.
    """

    if not path:
        return path

    path = _expanduser(path)
    if not _isabs(path):
        path = _joinpath(cwd, path)

    return _realpath(path)

def getNativePath(path):
    """
    Return native path from POSIX path
    """
    if not path:
        return path
    return path.replace('/', os.sep) if os.sep != '/' else path

def removeFile(path):
    """
    Remove file if it exists, like 'rm -f' does.
    Returns True if the file was removed.
    """

    path = getNativePath(path)
    log.info('rm -f %s', path)
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    except OSError as ex:
        raise PegBootError('Cannot remove %r' % path, ex) from ex
    return True

def removeFilesWithSuffix(suffix, dirpath = '.'):
    """
    Remove all files with the name suffix from the directory dirpath.
    Sub directories are not touched.
    Returns list of names of the removed files.
    """

    try:
        names = sorted(os.listdir(dirpath))
    except OSError as ex:
        raise PegBootError('Cannot read directory %r' % dirpath, ex) from ex

    removed = []
    for name in names:
        if not name.endswith(suffix):
            continue
        path = name if dirpath == '.' else _joinpath(dirpath, name)
        if os.path.isdir(path):
            continue
        if removeFile(path):
            removed.append(name)
    return removed

class DirStack(object):
    """
    Stack of working directories. The process working directory must be
    changed only with this class while a build runs so that every switch
    is undone in LIFO order.
    """

    __slots__ = ('_stack', )

    def __init__(self):
        self._stack = []

    def __len__(self):
        return len(self._stack)

    def enter(self, dirpath):
        """
        Change current working directory to dirpath.
        Returns the previous working directory.
        """

        dirpath = getNativePath(dirpath)
        try:
            prev = os.getcwd()
        except OSError as ex:
            raise PegBootDirNotFoundError('.', 'Current directory is not accessible.') from ex

        try:
            os.chdir(dirpath)
        except OSError as ex:
            raise PegBootDirNotFoundError(dirpath,
                "Cannot change directory to %r: %s" % (dirpath, ex)) from ex

        self._stack.append(prev)
        log.info('cd %s', dirpath)
        return prev

    def leave(self):
        """
        Restore the working directory saved by the last call of 'enter'.
        Returns the restored directory.
        """

        if not self._stack:
            raise PegBootError('Directory stack is empty')

        prev = self._stack.pop()
        try:
            os.chdir(prev)
        except OSError as ex:
            raise PegBootDirNotFoundError(prev,
                "Cannot return to directory %r: %s" % (prev, ex)) from ex
        log.info('cd %s', prev)
        return prev

    @contextmanager
    def scope(self, dirpath):
        """
        Context manager to run some code in the directory dirpath.
        The previous directory is restored on any exit.
        """

        prev = self.enter(dirpath)
        try:
            yield prev
        finally:
            self.leave()

def writeFileAtomic(path, data):
    """
    Write bytes into the file 'path' so that readers never see a partially
    written file. Existing file is overwritten.
    """

    import tempfile

    path = getNativePath(path)
    dirpath = os.path.dirname(path) or '.'
    try:
        fd, tmppath = tempfile.mkstemp(prefix = '.pegboot.', dir = dirpath)
    except OSError as ex:
        raise PegBootError('Cannot write file %r' % path, ex) from ex

    try:
        with os.fdopen(fd, 'wb') as file:
            file.write(data)
        os.replace(tmppath, path)
    except OSError as ex:
        try:
            os.remove(tmppath)
        except OSError:
            pass
        raise PegBootError('Cannot write file %r' % path, ex) from ex
