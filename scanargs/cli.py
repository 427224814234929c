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
""" Command line interface of the classifier.

It takes a compiler invocation, either as the remaining arguments or as a
single shell quoted string, and reports whether it can be distributed. The
exit code tells the answer, so build scripts can use it without parsing the
output. """

import argparse
import functools
import json
import logging
import os
import re
import shlex
import sys

from scanargs import __version__
from scanargs.filename import SourceTable
from scanargs.scan import BadArgumentsError, Distributable, scan_args

EXIT_DISTRIBUTABLE = 0
EXIT_LOCAL_ONLY = 100
EXIT_BAD_ARGUMENTS = 101
EXIT_INTERNAL_ERROR = 64  # some non used exit code for internal errors
EXIT_INTERRUPTED = 130  # signal received exit code for bash

SOURCE_EXT_ENVIRONMENT = 'SCANARGS_SOURCE_EXT'


def shell_split(string):
    # type: (str) -> List[str]
    """ Takes a command string and returns as a list. """

    def unescape(arg):
        # type: (str) -> str
        """ Gets rid of the escaping characters. """

        if len(arg) >= 2 and arg[0] == arg[-1] and arg[0] == '"':
            return re.sub(r'\\(["\\])', r'\1', arg[1:-1])
        return re.sub(r'\\([\\ $%&\(\)\[\]\{\}\*|<>@?!])', r'\1', arg)

    return [unescape(token) for token in shlex.split(string)]


def reconfigure_logging(verbose_level):
    """ Reconfigure logging level and format based on the verbose flag.

    :param verbose_level: number of `-v` flags received by the command
    :return: no return value
    """
    # exit when nothing to do
    if verbose_level == 0:
        return

    root = logging.getLogger()
    # tune level
    level = logging.WARNING - min(logging.WARNING, (10 * verbose_level))
    root.setLevel(level)
    # be verbose with messages
    if verbose_level <= 3:
        fmt_string = '%(name)s: %(levelname)s: %(message)s'
    else:
        fmt_string = '%(name)s: %(levelname)s: %(funcName)s: %(message)s'
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=fmt_string))
    root.handlers = [handler]


def command_entry_point(function):
    # type: (Callable[[], int]) -> Callable[[], int]
    """ Decorator for command entry methods.

    The decorator initialize/shutdown logging and guard on programming
    errors (catch exceptions).

    The decorated method can have arbitrary parameters, the return value will
    be the exit code of the process. """

    @functools.wraps(function)
    def wrapper(*args, **kwargs):
        """ Do housekeeping tasks and execute the wrapped method. """

        try:
            logging.basicConfig(format='%(name)s: %(message)s',
                                level=logging.WARNING,
                                stream=sys.stderr)
            # this hack to get the executable name as %(name)
            logging.getLogger().name = os.path.basename(sys.argv[0])
            return function(*args, **kwargs)
        except KeyboardInterrupt:
            logging.warning('Keyboard interrupt')
            return EXIT_INTERRUPTED
        except BadArgumentsError:
            logging.error("The compiler name shall be the first element of "
                          "the command.")
            return EXIT_BAD_ARGUMENTS
        except OSError:
            logging.exception('Internal error.')
            if logging.getLogger().isEnabledFor(logging.DEBUG):
                logging.error("Please report this bug and attach the output "
                              "to the bug report")
            else:
                logging.error("Please run this command again and turn on "
                              "verbose mode (add '-vvvv' as argument).")
            return EXIT_INTERNAL_ERROR
        finally:
            logging.shutdown()

    return wrapper


@command_entry_point
def main(argv=None):
    # type: (Optional[List[str]]) -> int
    """ Entry point for 'scanargs' command. """

    args = parse_args(argv)
    is_source = SourceTable(args.source_ext, only_use=args.only_source_ext)
    logging.debug('source files are recognized by %s', is_source)

    decision = scan_args(args.compilation, is_source=is_source)
    print(format_decision(decision, args.format))

    if isinstance(decision, Distributable):
        return EXIT_DISTRIBUTABLE
    return EXIT_LOCAL_ONLY


def format_decision(decision, output_format):
    # type: (Union[Distributable, LocalOnly], str) -> str
    """ Render the decision for the standard output. """

    distributable = isinstance(decision, Distributable)
    if output_format == 'text':
        if distributable:
            return 'distributable: {} -> {}: {}'.format(
                decision.input_file,
                decision.output_file,
                ' '.join(shlex.quote(arg) for arg in decision.argv))
        return 'local: {}'.format(decision.reason)

    entry = dict(decision._asdict())
    entry['distributable'] = distributable
    return json.dumps(entry, sort_keys=True, indent=4)


def parse_args(argv=None):
    """ Parse and validate command-line arguments for scanargs. """

    parser = create_parser()
    args = parser.parse_args(argv)

    reconfigure_logging(args.verbose)
    logging.debug('Raw arguments %s', sys.argv if argv is None else argv)

    # the command can come from the option or as the remaining arguments
    if args.command is not None:
        if args.compilation:
            parser.error(message='give the command either with --command '
                                 'or after the options, not both')
        args.compilation = shell_split(args.command)
    elif args.compilation and args.compilation[0] == '--':
        args.compilation = args.compilation[1:]

    # short validation logic
    if not args.compilation:
        parser.error(message='missing compiler command')

    logging.debug('Parsed arguments: %s', args)
    return args


def create_parser():
    """ Creates a parser for command-line arguments to 'scanargs'. """

    parser = argparse.ArgumentParser(
        prog='scanargs',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter)

    parser.add_argument(
        '--version',
        action='version',
        version='%(prog)s {}'.format(__version__))
    parser.add_argument(
        '--verbose', '-v',
        action='count',
        default=0,
        help="""Enable verbose output from '%(prog)s'. A second, third and
        fourth flags increases verbosity.""")
    parser.add_argument(
        '--format',
        choices=['json', 'text'],
        default='json',
        help="""The format of the decision printed to the standard
        output.""")
    parser.add_argument(
        '--source-ext',
        metavar='<extension>',
        dest='source_ext',
        action='append',
        default=[ext for ext in
                 os.getenv(SOURCE_EXT_ENVIRONMENT, '').split(os.pathsep)
                 if ext],
        help="""Hint '%(prog)s' to classify files with the given extension
        as source files.""")
    parser.add_argument(
        '--only-source-ext',
        action='store_true',
        help="""Only use extensions given to '--source-ext' (or in the
        {} environment variable).""".format(SOURCE_EXT_ENVIRONMENT))
    parser.add_argument(
        '--command',
        metavar='<string>',
        help="""The compiler invocation as a single shell quoted string.""")

    parser.add_argument(
        dest='compilation', nargs=argparse.REMAINDER,
        help="""Compiler invocation to classify.""")
    return parser


if __name__ == "__main__":
    sys.exit(main())
