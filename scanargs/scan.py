# -*- coding: utf-8 -*-

# Copyright (C) 2026 by the scanargs authors
# This file is part of scanargs.
#
# scanargs is a tool to decide whether a compiler call can be distributed.
#
# scanargs is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# scanargs is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
""" This module is responsible to classify a single compiler invocation:
can it be executed on a remote machine, or it has to run locally.

The compiler argument rules are complex, and a wrong answer here breaks the
build silently. Therefore the scanner is conservative: it knows about the
flags which make the distribution unsafe and about the ones which name the
input and output files. Every other flag is considered to be harmless.

The same scan also finds the input source and the output object file names.
When the output is not given, the implied one is appended to the command,
and that extended command is the one which shall be executed. """

import collections
import logging

from scanargs import filename

# Results of the classification. Callers shall branch on the type, the
# reason is only for humans to read.
Distributable = collections.namedtuple(
    'Distributable', ['input_file', 'output_file', 'argv'])

LocalOnly = collections.namedtuple('LocalOnly', ['reason'])

PREPROCESS_ONLY = 'preprocess-only, must run locally'
IMPLIES_PREPROCESS = 'implies preprocess-only'
ASSEMBLER_LISTING = 'assembler listing output, must run locally'
PROFILING = 'emits local profiling artifacts'
LANGUAGE_OVERRIDE = 'explicit language override, ambiguous, run locally'
MULTIPLE_INPUTS = 'multiple input files'
MULTIPLE_OUTPUTS = 'multiple outputs / looks like a link step'
MISSING_OUTPUT = 'missing output file argument'
MISSING_DEPENDENCY_ARGUMENT = 'missing dependency flag argument'
NOT_COMPILE = 'not a compile invocation'
NO_INPUT = 'no visible input file'
NO_IMPLIED_OUTPUT = 'cannot derive implied output name'
STDOUT_OUTPUT = 'ambiguous stdout output, must run locally'

# Flags which make the compilation local right away.
LOCAL_ONLY_FLAGS = {
    # the preprocessor output goes to stdout or to the named output
    '-E': PREPROCESS_ONLY,
    # coverage and profiling notes are written next to the object file
    '-fprofile-arcs': PROFILING,
    '-ftest-coverage': PROFILING,
    # the language override changes how the following inputs are read
    '-x': LANGUAGE_OVERRIDE,
}  # type: Dict[str, str]

# Map of dependency generation flags which are safe to distribute.
#
# These generate dependencies as a side effect of the preprocessing (which
# happens locally), or only modify the behaviour of other -M flags.
#
# Option names are mapped to the number of following arguments which should
# be skipped.
DEPENDENCY_FLAGS = {
    '-MD': 0,
    '-MMD': 0,
    '-MG': 0,
    '-MP': 0,
    '-MF': 1,
    '-MT': 1,
    '-MQ': 1,
}  # type: Dict[str, int]


class BadArgumentsError(ValueError):
    """ The argument vector does not start with a compiler name.

    The implicit compiler name shall be resolved before the classification.
    This is an integration error, not a classification outcome. """
    pass


class ClassificationState:
    """ What the scanner has learned about the invocation so far. """

    def __init__(self):
        self.seen_compile_only = False
        self.seen_stop_after_assemble = False
        self.input_file = None  # type: Optional[str]
        self.output_file = None  # type: Optional[str]

    def capture_input(self, source):
        # type: (ClassificationState, str) -> Optional[LocalOnly]
        logging.debug('found input file "%s"', source)
        if self.input_file is not None:
            return LocalOnly(MULTIPLE_INPUTS)
        self.input_file = source
        return None

    def capture_output(self, output):
        # type: (ClassificationState, str) -> Optional[LocalOnly]
        logging.debug('found object/output file "%s"', output)
        if self.output_file is not None:
            return LocalOnly(MULTIPLE_OUTPUTS)
        self.output_file = output
        return None


def copy_argv(argv):
    # type: (Iterable[str]) -> List[str]
    """ Returns a private copy of the arguments, which can be extended
    without touching the caller's sequence. """

    return list(argv)


def scan_args(argv, is_source=filename.is_source):
    # type: (Iterable[str], Callable[[str], bool]) -> Union[Distributable, LocalOnly]
    """ Parse the arguments, find the input and output files, and work out
    whether it is possible to distribute this invocation.

    :param argv:        the compiler invocation, the first element is the
                        compiler name
    :param is_source:   predicate to recognize source file names
    :return: Distributable with the command to execute, or LocalOnly with
             the reason why it has to run on this machine. """

    arguments = copy_argv(argv)
    logging.debug('scanning arguments: %s', arguments)

    # Implied compiler names (like 'distcc -c hello.c') are resolved before
    # this call. At this point the first argument is always a compiler.
    if not arguments or arguments[0].startswith('-'):
        logging.error('unrecognized option in compiler position: %s',
                      arguments[0] if arguments else '')
        raise BadArgumentsError('compiler name expected: {}'.format(arguments))

    state = ClassificationState()
    result = _scan_flags(arguments, state, is_source)
    if result is None:
        result = _finalize(arguments, state)

    if isinstance(result, LocalOnly):
        logging.info('running locally: %s', result.reason)
    return result


def _scan_flags(arguments, state, is_source):
    # type: (List[str], ClassificationState, Callable[[str], bool]) -> Optional[LocalOnly]
    """ Single pass over the arguments. Returns early when the invocation
    shall run locally, otherwise the state is filled. """

    args = iter(arguments[1:])
    for arg in args:
        if arg.startswith('-'):
            if arg in LOCAL_ONLY_FLAGS:
                logging.debug('%s must be local', arg)
                return LocalOnly(LOCAL_ONLY_FLAGS[arg])
            elif arg in DEPENDENCY_FLAGS:
                for _ in range(DEPENDENCY_FLAGS[arg]):
                    # the appended -o would become the flag's argument
                    if next(args, None) is None:
                        return LocalOnly(MISSING_DEPENDENCY_ARGUMENT)
            # -M(anything else) implies -E: the preprocessor writes the
            # make-style dependencies and the compiler is not executed
            elif arg.startswith('-M'):
                logging.debug('%s implies -E (maybe) and must be local', arg)
                return LocalOnly(IMPLIES_PREPROCESS)
            # the only assembler option which matters is -al=output, which
            # writes the listing into a local file. several options can be
            # given after -Wa, but looking for '=' is enough.
            elif arg.startswith('-Wa,'):
                if '=' in arg:
                    logging.debug('%s writes assembly listing', arg)
                    return LocalOnly(ASSEMBLER_LISTING)
            elif arg == '-S':
                state.seen_stop_after_assemble = True
            elif arg == '-c':
                state.seen_compile_only = True
            elif arg == '-o':
                output = next(args, None)
                if output is None:
                    return LocalOnly(MISSING_OUTPUT)
                result = state.capture_output(output)
                if result is not None:
                    return result
            elif arg.startswith('-o'):
                result = state.capture_output(arg[2:])
                if result is not None:
                    return result
        elif is_source(arg):
            result = state.capture_input(arg)
            if result is not None:
                return result
        elif filename.is_object(arg):
            result = state.capture_output(arg)
            if result is not None:
                return result
    return None


def _finalize(arguments, state):
    # type: (List[str], ClassificationState) -> Union[Distributable, LocalOnly]
    if not state.seen_compile_only and not state.seen_stop_after_assemble:
        return LocalOnly(NOT_COMPILE)

    if state.input_file is None:
        return LocalOnly(NO_INPUT)

    if state.output_file is None:
        result = _synthesize_output(arguments, state)
        if result is not None:
            return result

    logging.debug('compile %s to %s', state.input_file, state.output_file)

    # Compilers treat '-o -' either as stdout or as a file named '-'.
    if state.output_file == '-':
        return LocalOnly(STDOUT_OUTPUT)

    return Distributable(input_file=state.input_file,
                         output_file=state.output_file,
                         argv=arguments)


def _synthesize_output(arguments, state):
    # type: (List[str], ClassificationState) -> Optional[LocalOnly]
    """ Command line like 'cc -c hello.c' wants 'hello.o', but does not say
    so. Append the implied output to the arguments.

    The other implied output, 'a.out', is not a concern here: that is a link
    and it was rejected already for missing -c or -S. """

    # -S takes precedence over -c, it stops the compiler earlier
    extension = '.s' if state.seen_stop_after_assemble else '.o'
    output = filename.output_from_source(state.input_file, extension)
    if output is None:
        return LocalOnly(NO_IMPLIED_OUTPUT)

    logging.info('no visible output file, going to add "-o %s" at end',
                 output)
    arguments.extend(['-o', output])
    state.output_file = output
    return None
