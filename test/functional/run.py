#!/usr/bin/env python
""" Runs the scanargs command against the case directories.

Each case directory has a `command` file (the compiler invocation) and an
`output` file (a regex the text output of scanargs shall match).

    python test/functional/run.py --test-cases test/functional/cases

The cases also run under pytest, see test_cases.py next to this file. """

from os import listdir
from os.path import isdir, join
import subprocess
import logging
import re
import shlex


def _test(sut, path):
    command = _read(path, 'command')
    cmd = sut + ['--format', 'text', '--command', command]
    logging.debug('executing {}'.format(cmd))
    child = subprocess.Popen(cmd, stdout=subprocess.PIPE)
    output, _ = child.communicate()
    return output.decode('utf-8')


def _read(path, name):
    file = join(path, name)
    logging.debug('reading {}'.format(file))
    with open(file, "r") as fd:
        return fd.read().strip()


def _evaluate(sut, path):
    result = _test(sut, path)
    regex = re.compile(_read(path, 'output'))
    if regex.match(result) is None:
        logging.error('failed test: {}'.format(path))
        logging.info('stdout: {}'.format(result))
        return False
    return True


def main():
    from argparse import ArgumentParser
    parser = ArgumentParser()
    parser.add_argument("--sut",
                        metavar='FILE',
                        default='scanargs',
                        help="SUT command, like 'python -m scanargs.cli'")
    parser.add_argument("--test-cases",
                        metavar='DIRECTORY',
                        required=True,
                        help="where the tests files are")
    parser.add_argument('--log-level',
                        metavar='LEVEL',
                        choices='DEBUG INFO WARN ERROR'.split(),
                        default='INFO',
                        help="Choose a level from DEBUG, INFO (default), \
                              WARN or ERROR")
    args = parser.parse_args()

    logging.basicConfig(format='%(levelname)s: %(message)s', level=args.log_level)

    parent = args.test_cases
    subdirs = [join(parent, d) for d in sorted(listdir(parent))
               if isdir(join(parent, d))]
    sut = shlex.split(args.sut)
    results = [_evaluate(sut, t) for t in subdirs]
    return all(results)


if __name__ == '__main__':
    import sys
    if main():
        sys.exit(0)
    else:
        sys.exit(1)
