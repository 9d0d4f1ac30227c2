# coding=utf-8
#

"""
 Copyright (c) 2023 Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
from pegboot import utils

APPNAME = 'pegboot'
CAP_APPNAME = 'PegBoot'
AUTHOR = 'Alexander Magola'

CWD = os.getcwd()
PLATFORM = utils.platform()

DEFAULT_TARGET = 'peg'

CONF_FILENAME = 'pegboot.yaml'
BUILDINFO_FILENAME = 'buildinfo.go'
GENERATED_SUFFIX = '.peg.go'

DEFAULT_GO_EXE = 'go'
DEFAULT_TEST_ARGS = ['-short', '-tags', 'grammars', './...']
DEFAULT_BENCH_ARGS = ['-benchmem', '-bench', '.']

EXITCODE_FATAL = 1
EXITCODE_USAGE = 2
EXITCODE_INTERRUPTED = 68
