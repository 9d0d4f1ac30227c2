# coding=utf-8
#

# pylint: skip-file

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
import pytest

import tests
from pegboot import log, error

@pytest.fixture(autouse = True)
def noColors(monkeypatch):
    monkeypatch.delenv('PEGBOOT_GO', raising = False)
    monkeypatch.delenv('PEGBOOT_ROOT', raising = False)
    monkeypatch.setenv('NOCOLOR', '1')
    log.enableColorsByCli('no')
    log.setVerbose(0)
    error.verbose = 0

@pytest.fixture
def rootdir(tmpdir, monkeypatch):
    path = str(tmpdir.realpath())
    monkeypatch.chdir(path)
    return path
