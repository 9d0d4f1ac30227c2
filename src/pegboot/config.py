# coding=utf-8
#

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.

 Optional project config 'pegboot.yaml'. It can only tune external tools,
 the graph of targets is defined in the code.
"""

__all__ = [
    'load',
    'findConfFile',
]

import os
import io

import yaml as pyyaml

from pegboot.constants import (
    CONF_FILENAME, DEFAULT_GO_EXE, DEFAULT_TEST_ARGS, DEFAULT_BENCH_ARGS,
)
from pegboot.error import PegBootConfError
from pegboot.pyutils import AutoDict, maptype, stringtype
from pegboot.utils import toList

try:
    YamlLoader = pyyaml.CSafeLoader
except AttributeError:
    YamlLoader = pyyaml.SafeLoader

def _isStrList(val):
    return isinstance(val, list) and all(isinstance(x, stringtype) for x in val)

def _isStrOrStrList(val):
    return isinstance(val, stringtype) or _isStrList(val)

# param name -> (validator, description of expected type)
SCHEME = {
    'go'         : (lambda x: isinstance(x, stringtype) and bool(x), 'non-empty string'),
    'test-args'  : (_isStrOrStrList, 'string or list of strings'),
    'bench-args' : (_isStrOrStrList, 'string or list of strings'),
}

ENV_VARS = {
    'go' : 'PEGBOOT_GO',
}

def defaults():
    """ Get config with default values """

    return AutoDict({
        'go' : DEFAULT_GO_EXE,
        'test-args' : list(DEFAULT_TEST_ARGS),
        'bench-args' : list(DEFAULT_BENCH_ARGS),
    })

def findConfFile(dirpath):
    """
    Find config file in the dirpath.
    Returns None if the file doesn't exist.
    """

    path = os.path.join(dirpath, CONF_FILENAME)
    return path if os.path.isfile(path) else None

def _readYaml(filepath):

    try:
        with io.open(filepath, 'rt', encoding = 'utf-8') as stream:
            loader = YamlLoader(stream)
            try:
                return loader.get_single_data()
            finally:
                loader.dispose()
    except pyyaml.YAMLError as ex:
        raise PegBootConfError(str(ex), ex = ex, confpath = filepath) from ex
    except (OSError, UnicodeDecodeError) as ex:
        raise PegBootConfError('Cannot read file: %s' % ex, ex = ex,
                               confpath = filepath) from ex

def validate(data, filepath = None):
    """
    Check loaded config data. Raises PegBootConfError.
    """

    if not isinstance(data, maptype):
        raise PegBootConfError("File has invalid structure: it must be a map",
                               confpath = filepath)

    for key, val in data.items():
        if not isinstance(key, stringtype):
            raise PegBootConfError("The variable %r is not string" % (key, ),
                                   confpath = filepath)
        rule = SCHEME.get(key)
        if rule is None:
            raise PegBootConfError("Unknown parameter %r. Allowed parameters: %s"
                                   % (key, ', '.join(sorted(SCHEME))),
                                   confpath = filepath)
        check, expected = rule
        if not check(val):
            raise PegBootConfError("Parameter %r has invalid value %r, "
                                   "expected %s" % (key, val, expected),
                                   confpath = filepath)

def load(rootdir, environ = None):
    """
    Load config of the project from the rootdir. Defaults are used for all
    parameters if there is no config file. Values from env vars have
    priority over values from the file.
    """

    if environ is None:
        environ = os.environ

    conf = defaults()

    filepath = findConfFile(rootdir)
    if filepath is not None:
        data = _readYaml(filepath)
        # empty file is allowed
        if data is not None:
            validate(data, filepath)
            conf.update(data)
            conf.confpath = filepath

    for name, envName in ENV_VARS.items():
        val = environ.get(envName)
        if val:
            conf[name] = val

    for name in ('test-args', 'bench-args'):
        conf[name] = toList(conf[name])

    return conf
