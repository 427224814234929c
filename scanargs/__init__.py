""" scanargs: decide whether a compiler invocation can be distributed. """

__version__ = '1.0.0'

from scanargs.scan import (BadArgumentsError, Distributable, LocalOnly,
                           copy_argv, scan_args)
from scanargs.filename import SourceTable, is_object, is_source

__all__ = [
    'BadArgumentsError',
    'Distributable',
    'LocalOnly',
    'SourceTable',
    'copy_argv',
    'is_object',
    'is_source',
    'scan_args',
]
