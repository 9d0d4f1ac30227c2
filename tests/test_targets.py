# coding=utf-8
#

# pylint: disable = missing-docstring, invalid-name, redefined-outer-name

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
import time
import pytest

import tests.common as cmn
from pegboot import error
from pegboot.deps import TargetRef, fileDeps, targetDeps
from pegboot.staleness import evaluateById
from pegboot.targets import (
    TargetId, TARGETS, GRAMMAR_TARGETS, Target, validateRegistry,
    findTargetId, clean, bench,
)

joinpath = os.path.join

OLD = time.time() - 1000
FUTURE = time.time() + 1000

SOURCES = cmn.PROJECT_SOURCES
CHAIN_COMMANDS = cmn.CHAIN_COMMANDS

@pytest.fixture
def project(rootdir):
    cmn.makeFiles(rootdir, SOURCES, mtime = OLD)
    return rootdir

def build(rootdir, targetId, runner = None):
    runner = runner if runner is not None else cmn.FakeRunner()
    ctx = cmn.makeContext(rootdir, runner = runner)
    result = evaluateById(ctx, targetId)
    return result, ctx, runner

def testRegistry():
    assert set(TARGETS) == set(TargetId)
    validateRegistry(TARGETS)

    outputs = [x.output for x in TARGETS.values() if x.output]
    assert len(outputs) == len(set(outputs))

    assert findTargetId('peg') == TargetId.PEG
    assert findTargetId('grammars_java') == TargetId.GRAMMARS_JAVA
    assert findTargetId('unknown') is None

def testBootstrapChainWiring():
    chain = [
        TargetId.BOOTSTRAP, TargetId.PEG0, TargetId.PEG1, TargetId.PEG2,
        TargetId.PEG3, TargetId.PEG_BOOTSTRAP, TargetId.PEG_PEG_GO, TargetId.PEG,
    ]
    for prev, cur in zip(chain, chain[1:]):
        assert targetDeps(TARGETS[cur].deps) == [prev]

    assert fileDeps(TARGETS[TargetId.BOOTSTRAP].deps) == \
        ['bootstrap/main.go', 'tree/peg.go']
    assert fileDeps(TARGETS[TargetId.PEG1].deps) == \
        ['cmd/peg-bootstrap/bootstrap.peg']
    assert fileDeps(TARGETS[TargetId.PEG3].deps) == ['peg.peg']
    assert fileDeps(TARGETS[TargetId.PEG_BOOTSTRAP].deps) == []
    assert TARGETS[TargetId.PEG].output == 'peg'

    for target in GRAMMAR_TARGETS:
        assert targetDeps(target.deps) == [TargetId.PEG]
        grammar = fileDeps(target.deps)[0]
        assert target.output == grammar + '.go'
        assert target.workdir == os.path.dirname(grammar)

    testTarget = TARGETS[TargetId.TEST]
    assert testTarget.output == ''
    assert targetDeps(testTarget.deps) == [x.id for x in GRAMMAR_TARGETS]

def testValidateRegistry():
    def nothing(ctx):
        pass

    targets = {
        TargetId.PEG0: Target(TargetId.PEG0, 'out', [], nothing),
        TargetId.PEG1: Target(TargetId.PEG1, 'out', [], nothing),
    }
    with pytest.raises(error.PegBootLogicError):
        validateRegistry(targets)

    targets = { TargetId.PEG0: Target(TargetId.PEG0, 'out', [TargetId.PEG], nothing) }
    with pytest.raises(error.PegBootLogicError):
        validateRegistry(targets)

    targets = { TargetId.PEG1: Target(TargetId.PEG0, 'out', [], nothing) }
    with pytest.raises(error.PegBootLogicError):
        validateRegistry(targets)

    for path in ('/abs/path', 'cmd\\peg0'):
        targets = { TargetId.PEG0: Target(TargetId.PEG0, 'out', [path], nothing) }
        with pytest.raises(error.PegBootLogicError):
            validateRegistry(targets)
        targets = { TargetId.PEG0: Target(TargetId.PEG0, path, [], nothing) }
        with pytest.raises(error.PegBootLogicError):
            validateRegistry(targets)

def testBuildFromScratch(project):
    result, ctx, runner = build(project, TargetId.PEG)

    assert result is False
    assert ctx.invocations == CHAIN_COMMANDS
    assert os.getcwd() == project
    assert len(ctx.dirs) == 0

    bootstrapDir = joinpath(project, 'cmd', 'peg-bootstrap')
    cmdLines = runner.cmdLines
    assert runner.calls[0][0] == joinpath(project, 'bootstrap')
    assert cmdLines[0] == ['go', 'build']
    assert cmdLines[1] == ['../../bootstrap/bootstrap']
    assert cmdLines[2] == ['go', 'build', '-tags', 'bootstrap', '-o', 'peg0']
    assert cmdLines[3] == ['./peg0']
    assert runner.calls[3][0] == bootstrapDir
    assert runner.calls[3][2]['captureOutput']
    with open(joinpath(project, 'cmd/peg-bootstrap/bootstrap.peg'), 'rb') as file:
        assert runner.calls[3][2]['inputData'] == file.read()
    assert cmdLines[-4] == ['cmd/peg-bootstrap/peg-bootstrap']
    assert cmdLines[-3] == ['go', 'build']
    assert cmdLines[-2] == ['./peg', '-inline', '-switch', 'peg.peg']
    assert cmdLines[-1] == ['go', 'build']
    assert runner.calls[-1][0] == project

    for binary in ('peg0', 'peg1', 'peg2', 'peg3', 'peg-bootstrap'):
        assert os.path.isfile(joinpath(bootstrapDir, binary))
    # only the files of the last stage are left
    assert os.path.isfile(joinpath(bootstrapDir, 'peg-bootstrap.peg.go'))
    assert not os.path.exists(joinpath(bootstrapDir, 'peg1.peg.go'))
    assert os.path.isfile(joinpath(project, 'peg'))
    assert os.path.isfile(joinpath(project, 'peg.peg.go'))

    assert all(x is False for x in ctx.cache.values())

def testSecondBuildDoesNothing(project):
    build(project, TargetId.PEG)

    result, ctx, runner = build(project, TargetId.PEG)
    assert result is True
    assert ctx.invocations == 0
    assert not runner.calls

def testChangedGrammarOfStage(project):
    build(project, TargetId.PEG)

    cmn.touch(joinpath(project, 'cmd', 'peg-bootstrap', 'bootstrap.peg'), FUTURE)
    result, ctx, runner = build(project, TargetId.PEG)

    assert result is False
    assert ctx.cache[TargetId.BOOTSTRAP] is True
    assert ctx.cache[TargetId.PEG0] is True
    for targetId in (TargetId.PEG1, TargetId.PEG2, TargetId.PEG3,
                     TargetId.PEG_BOOTSTRAP, TargetId.PEG_PEG_GO):
        assert ctx.cache[targetId] is False
    assert runner.cmdLines[0] == ['./peg0']
    assert ctx.invocations == CHAIN_COMMANDS - 3

def testChangedTreeRebuildsEverything(project):
    build(project, TargetId.PEG)

    cmn.touch(joinpath(project, 'tree', 'peg.go'), FUTURE)
    result, ctx, _ = build(project, TargetId.PEG)
    assert result is False
    assert ctx.invocations == CHAIN_COMMANDS

def testTestTarget(project):
    result, ctx, runner = build(project, TargetId.TEST)

    assert result is False
    grammarCmds = [x for x in runner.calls if x[1][0] == '../../peg']
    assert len(grammarCmds) == len(GRAMMAR_TARGETS)
    assert grammarCmds[0][0] == joinpath(project, 'grammars', 'c')
    assert grammarCmds[0][1] == ['../../peg', '-switch', '-inline', 'c.peg']
    assert runner.cmdLines[-1] == ['go', 'test', '-short', '-tags', 'grammars', './...']
    # peg is built once for all grammars
    assert runner.cmdLines.count(['go', 'build']) == 3
    assert ctx.invocations == CHAIN_COMMANDS + len(GRAMMAR_TARGETS) + 1

    for target in GRAMMAR_TARGETS:
        assert os.path.isfile(joinpath(project, target.output))

    # all grammars are up to date but tests are run again
    result, ctx, runner = build(project, TargetId.TEST)
    assert result is False
    assert runner.cmdLines == [['go', 'test', '-short', '-tags', 'grammars', './...']]
    assert ctx.cache[TargetId.PEG] is True
    assert all(ctx.cache[x.id] is True for x in GRAMMAR_TARGETS)

    # one grammar is changed
    cmn.touch(joinpath(project, 'grammars', 'fexl', 'fexl.peg'), FUTURE)
    result, ctx, runner = build(project, TargetId.TEST)
    assert result is False
    assert runner.cmdLines == [
        ['../../peg', '-switch', '-inline', 'fexl.peg'],
        ['go', 'test', '-short', '-tags', 'grammars', './...'],
    ]

def testConfiguredTools(project):
    runner = cmn.FakeRunner()
    conf = { 'go': '/opt/go/bin/go', 'test-args': ['-run', 'TestX'] }
    ctx = cmn.makeContext(project, runner = runner, conf = conf)
    evaluateById(ctx, TargetId.TEST)
    assert runner.cmdLines[0] == ['/opt/go/bin/go', 'build']
    assert runner.cmdLines[-1] == ['/opt/go/bin/go', 'test', '-run', 'TestX']

def testFailedCommandAbortsRun(project):
    runner = cmn.FakeRunner(failOn = lambda cmdLine: cmdLine[0] == './peg1')
    ctx = cmn.makeContext(project, runner = runner)

    with pytest.raises(error.PegBootProcessFailed) as excinfo:
        evaluateById(ctx, TargetId.TEST)

    assert excinfo.value.exitcode == 1
    assert runner.cmdLines[-1] == ['./peg1']
    assert os.getcwd() == project
    assert len(ctx.dirs) == 0
    bootstrapDir = joinpath(project, 'cmd', 'peg-bootstrap')
    assert not os.path.exists(joinpath(bootstrapDir, 'peg2.peg.go'))
    assert not os.path.exists(joinpath(bootstrapDir, 'peg2'))

def testMissingSourceIsFatal(project):
    os.remove(joinpath(project, 'tree', 'peg.go'))
    with pytest.raises(error.PegBootPathNotFoundError):
        build(project, TargetId.PEG)

def testClean(project):
    build(project, TargetId.TEST)

    runner = cmn.FakeRunner()
    ctx = cmn.makeContext(project, runner = runner)
    evaluateById(ctx, TargetId.PEG)
    assert ctx.cache
    # some trash from a previous failed stage
    cmn.writeFile(joinpath(project, 'cmd', 'peg-bootstrap', 'peg1.peg.go'))

    clean(ctx)

    assert not ctx.cache
    assert not runner.calls
    assert os.getcwd() == project
    assert not os.path.exists(joinpath(project, 'bootstrap', 'bootstrap'))
    bootstrapDir = joinpath(project, 'cmd', 'peg-bootstrap')
    for name in ('peg0', 'peg1', 'peg2', 'peg3', 'peg-bootstrap',
                 'peg1.peg.go', 'peg-bootstrap.peg.go'):
        assert not os.path.exists(joinpath(bootstrapDir, name))
    for target in GRAMMAR_TARGETS:
        assert not os.path.exists(joinpath(project, target.output))

    # sources are not touched
    for path in SOURCES:
        assert os.path.isfile(joinpath(project, *path.split('/')))

    # nothing to remove
    clean(ctx)

    # next evaluation builds everything again
    result, ctx, _ = build(project, TargetId.BOOTSTRAP)
    assert result is False

def testBench(project):
    runner = cmn.FakeRunner()
    ctx = cmn.makeContext(project, runner = runner)
    bench(ctx)
    assert ctx.invocations == CHAIN_COMMANDS + 1
    assert runner.cmdLines[-1] == ['go', 'test', '-benchmem', '-bench', '.']

    runner = cmn.FakeRunner()
    ctx = cmn.makeContext(project, runner = runner)
    bench(ctx)
    assert runner.cmdLines == [['go', 'test', '-benchmem', '-bench', '.']]

def testAllTarget(project):
    result, ctx, _ = build(project, TargetId.ALL)
    assert result is False
    assert ctx.invocations == CHAIN_COMMANDS + len(GRAMMAR_TARGETS)

    result, ctx, _ = build(project, TargetId.ALL)
    assert result is False
    assert ctx.invocations == 0
    assert ctx.cache[TargetId.PEG] is True

def testTargetRefs():
    refs = [x for x in TARGETS[TargetId.ALL].deps if isinstance(x, TargetRef)]
    assert refs[0] == TargetRef(TargetId.PEG)
