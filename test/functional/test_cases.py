""" Runs the functional cases with the scanargs module as the command. """

import importlib.util
import os
import sys

import pytest

HERE = os.path.dirname(os.path.abspath(__file__))
CASES = os.path.join(HERE, 'cases')


def load_runner():
    spec = importlib.util.spec_from_file_location(
        'functional_run', os.path.join(HERE, 'run.py'))
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


runner = load_runner()


@pytest.mark.parametrize('case', sorted(os.listdir(CASES)))
def test_case(case):
    sut = [sys.executable, '-m', 'scanargs.cli']
    assert runner._evaluate(sut, os.path.join(CASES, case))
