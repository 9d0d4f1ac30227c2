# coding=utf-8
#

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.

 Targets of the project. The peg generator is built from scratch in
 stages: each stage is made by the generator of the previous stage, and
 the last one regenerates its own source from its own grammar. Then the
 final binary regenerates the parsers of all the grammars.
"""

from enum import Enum

from pegboot.constants import (
    GENERATED_SUFFIX, DEFAULT_GO_EXE, DEFAULT_TEST_ARGS, DEFAULT_BENCH_ARGS,
)
from pegboot.deps import toDeps, fileDeps, targetDeps
from pegboot.error import PegBootLogicError
from pegboot.pathutils import removeFile, removeFilesWithSuffix
from pegboot.staleness import evaluateById
from pegboot.utils import toList
from pegboot import log

class TargetId(Enum):
    """ Identifiers of all targets """

    BOOTSTRAP = 'bootstrap'
    PEG0 = 'peg0'
    PEG1 = 'peg1'
    PEG2 = 'peg2'
    PEG3 = 'peg3'
    PEG_BOOTSTRAP = 'peg_bootstrap'
    PEG_PEG_GO = 'peg_peg_go'
    PEG = 'peg'
    GRAMMARS_C = 'grammars_c'
    GRAMMARS_CALCULATOR = 'grammars_calculator'
    GRAMMARS_CALCULATOR_AST = 'grammars_calculator_ast'
    GRAMMARS_FEXL = 'grammars_fexl'
    GRAMMARS_JAVA = 'grammars_java'
    GRAMMARS_LONG_TEST = 'grammars_long_test'
    TEST = 'test'
    ALL = 'all'

class Target(object):
    """
    Named unit of build work. Param 'output' is a POSIX path relative to
    the project root, it's empty for a target that only aggregates other
    targets. Action is a function that gets a BuildContext object.
    """

    __slots__ = ('id', 'output', 'deps', 'action', 'workdir', 'description')

    # pylint: disable = too-many-arguments
    def __init__(self, targetId, output, deps, action, workdir = None,
                 description = ''):
        self.id = targetId
        self.output = output
        self.deps = toDeps(*deps)
        self.action = action
        self.workdir = workdir
        self.description = description

    @property
    def name(self):
        """ Name of the target that is used in logs and CLI """
        return getattr(self.id, 'value', str(self.id))

    def run(self, ctx):
        """ Run action of the target in its working directory """

        if not self.workdir:
            self.action(ctx)
            return

        with ctx.chdir(ctx.path(self.workdir)):
            self.action(ctx)

    def __repr__(self):
        return 'Target(%r, output=%r)' % (self.name, self.output)

BOOTSTRAP_DIR = 'cmd/peg-bootstrap'
STAGE_BINARIES = ('peg0', 'peg1', 'peg2', 'peg3', 'peg-bootstrap')

def goExe(ctx):
    """ Get executable of the go toolchain """
    return ctx.tool('go', DEFAULT_GO_EXE)

def _buildBootstrap(ctx):
    ctx.command(goExe(ctx), 'build')

def _buildPeg0(ctx):
    removeFilesWithSuffix(GENERATED_SUFFIX)
    ctx.command('../../bootstrap/bootstrap')
    ctx.command(goExe(ctx), 'build', '-tags', 'bootstrap', '-o', 'peg0')

def _makeStageAction(prevBinary, grammar, binary):

    def action(ctx):
        removeFilesWithSuffix(GENERATED_SUFFIX)
        ctx.command('./' + prevBinary, inputFile = grammar,
                    outputFile = binary + GENERATED_SUFFIX)
        ctx.command(goExe(ctx), 'build', '-tags', 'bootstrap', '-o', binary)

    return action

def _buildPegPegGo(ctx):
    ctx.command(BOOTSTRAP_DIR + '/peg-bootstrap', inputFile = 'peg.peg',
                outputFile = 'peg.peg.go')
    ctx.command(goExe(ctx), 'build')
    ctx.command('./peg', '-inline', '-switch', 'peg.peg')

def _buildPeg(ctx):
    ctx.command(goExe(ctx), 'build')

def _makeGrammarAction(grammarFile):

    def action(ctx):
        ctx.command('../../peg', '-switch', '-inline', grammarFile)

    return action

def _runTests(ctx):
    args = toList(ctx.conf.get('test-args', DEFAULT_TEST_ARGS))
    ctx.command(goExe(ctx), 'test', *args)

def _nothing(ctx):
    # pylint: disable = unused-argument
    log.info('all targets are built')

def _stage(targetId, prevId, grammarDep, prevBinary, grammar):
    binary = targetId.value.replace('_', '-')
    deps = [prevId]
    if grammarDep:
        deps.append(grammarDep)
    return Target(targetId, '%s/%s' % (BOOTSTRAP_DIR, binary), deps,
                  _makeStageAction(prevBinary, grammar, binary),
                  workdir = BOOTSTRAP_DIR,
                  description = 'build %s with %s' % (binary, prevBinary))

def _grammar(targetId, dirpath, name):
    grammarFile = name + '.peg'
    return Target(targetId,
                  '%s/%s%s' % (dirpath, name, GENERATED_SUFFIX),
                  [TargetId.PEG, '%s/%s' % (dirpath, grammarFile)],
                  _makeGrammarAction(grammarFile), workdir = dirpath,
                  description = 'regenerate parser of %s' % grammarFile)

GRAMMAR_TARGETS = (
    _grammar(TargetId.GRAMMARS_C, 'grammars/c', 'c'),
    _grammar(TargetId.GRAMMARS_CALCULATOR, 'grammars/calculator', 'calculator'),
    _grammar(TargetId.GRAMMARS_CALCULATOR_AST, 'grammars/calculator_ast', 'calculator'),
    _grammar(TargetId.GRAMMARS_FEXL, 'grammars/fexl', 'fexl'),
    _grammar(TargetId.GRAMMARS_JAVA, 'grammars/java', 'java_1_7'),
    _grammar(TargetId.GRAMMARS_LONG_TEST, 'grammars/long_test', 'long'),
)

_GRAMMAR_IDS = [x.id for x in GRAMMAR_TARGETS]

_ALL_TARGETS = [
    Target(TargetId.BOOTSTRAP, 'bootstrap/bootstrap',
           ['bootstrap/main.go', 'tree/peg.go'],
           _buildBootstrap, workdir = 'bootstrap',
           description = 'build the hand written bootstrap generator'),
    Target(TargetId.PEG0, BOOTSTRAP_DIR + '/peg0',
           [BOOTSTRAP_DIR + '/main.go', TargetId.BOOTSTRAP],
           _buildPeg0, workdir = BOOTSTRAP_DIR,
           description = 'build peg0 with the bootstrap generator'),
    _stage(TargetId.PEG1, TargetId.PEG0, BOOTSTRAP_DIR + '/bootstrap.peg',
           'peg0', 'bootstrap.peg'),
    _stage(TargetId.PEG2, TargetId.PEG1, BOOTSTRAP_DIR + '/peg.bootstrap.peg',
           'peg1', 'peg.bootstrap.peg'),
    _stage(TargetId.PEG3, TargetId.PEG2, 'peg.peg', 'peg2', '../../peg.peg'),
    _stage(TargetId.PEG_BOOTSTRAP, TargetId.PEG3, None, 'peg3', '../../peg.peg'),
    Target(TargetId.PEG_PEG_GO, 'peg.peg.go', [TargetId.PEG_BOOTSTRAP],
           _buildPegPegGo,
           description = 'regenerate source of peg from its own grammar'),
    Target(TargetId.PEG, 'peg', [TargetId.PEG_PEG_GO, 'main.go'], _buildPeg,
           description = 'build peg from scratch'),
] + list(GRAMMAR_TARGETS) + [
    Target(TargetId.TEST, '', _GRAMMAR_IDS, _runTests,
           description = 'regenerate all grammars and run full test'),
    Target(TargetId.ALL, '', [TargetId.PEG] + _GRAMMAR_IDS, _nothing,
           description = 'build peg and regenerate all grammars'),
]

TARGETS = { x.id: x for x in _ALL_TARGETS }

def validateRegistry(targets):
    """
    Check that no two targets have the same output, that all referenced
    targets exist and that all file paths are relative POSIX paths.
    Raises PegBootLogicError.
    """

    outputs = {}
    for targetId, target in targets.items():
        if targetId != target.id:
            raise PegBootLogicError('Target %r is registered as %r'
                                    % (target.name, targetId))
        for depId in targetDeps(target.deps):
            if depId not in targets:
                raise PegBootLogicError('Target %r depends on unknown target %r'
                                        % (target.name, depId))
        for path in fileDeps(target.deps) + [target.output]:
            if path.startswith('/') or '\\' in path:
                raise PegBootLogicError('Path %r in target %r must be relative '
                                        'POSIX path' % (path, target.name))
        if not target.output:
            continue
        other = outputs.get(target.output)
        if other is not None:
            raise PegBootLogicError('Targets %r and %r have the same output %r'
                                    % (other, target.name, target.output))
        outputs[target.output] = target.name

validateRegistry(TARGETS)

def findTargetId(name):
    """ Get TargetId by name. Returns None if not found. """

    try:
        return TargetId(name)
    except ValueError:
        return None

def clean(ctx):
    """
    Remove all generated files and binaries regardless of their state.
    The cache of evaluated targets is reset.
    """

    removeFile(ctx.path('bootstrap/bootstrap'))
    for target in GRAMMAR_TARGETS:
        removeFile(ctx.path(target.output))

    with ctx.chdir(ctx.path(BOOTSTRAP_DIR)):
        removeFilesWithSuffix(GENERATED_SUFFIX)
        for name in STAGE_BINARIES:
            removeFile(name)

    ctx.resetCache()

def bench(ctx):
    """ Build peg if it's necessary and run benchmarks """

    evaluateById(ctx, TargetId.PEG)
    args = toList(ctx.conf.get('bench-args', DEFAULT_BENCH_ARGS))
    ctx.command(goExe(ctx), 'test', *args)
