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
""" This module knows about file names of a compilation: which arguments
look like source files, which ones look like object files and what is the
object file name the compiler would pick when it was not given. """

import logging
import os.path

# Map of source file extensions to the presumed language.
#
# Only sources which can be compiled on another machine are listed here.
# Assembly files are missing deliberately: those are not preprocessed the
# same way and assembling is cheap enough to do it locally.
SOURCE_EXTENSIONS = {
    '.c': 'c',
    '.i': 'c-cpp-output',
    '.ii': 'c++-cpp-output',
    '.cc': 'c++',
    '.cpp': 'c++',
    '.cxx': 'c++',
    '.cp': 'c++',
    '.c++': 'c++',
    '.C': 'c++',
    '.M': 'objective-c++',
    '.m': 'objective-c',
    '.mm': 'objective-c++',
    '.mi': 'objective-c-cpp-output',
    '.mii': 'objective-c++-cpp-output',
}  # type: Dict[str, str]

OBJECT_SUFFIX = '.o'


def find_extension(filename):
    # type: (str) -> Optional[str]
    """ Returns the extension of the file name (with the dot), or None when
    the name does not have one. """

    __, extension = os.path.splitext(os.path.basename(filename))
    return extension if extension else None


def classify_source(filename):
    # type: (str) -> Optional[str]
    """ Classify source file names and returns the presumed language,
    based on the file name extension.

    :param filename:    the source file name
    :return: the language from file name extension, None when not a source. """

    extension = find_extension(filename)
    return SOURCE_EXTENSIONS.get(extension) if extension else None


def is_source(filename):
    # type: (str) -> bool
    return classify_source(filename) is not None


def is_object(filename):
    # type: (str) -> bool
    return filename.endswith(OBJECT_SUFFIX)


class SourceTable:
    """ Configurable source file predicate.

    Instances are callable, so they can be passed to the argument scanner
    wherever the default `is_source` predicate is accepted. """

    def __init__(self, extensions=(), only_use=False):
        # type: (Iterable[str], bool) -> None
        given = [self._normalize(extension) for extension in extensions]
        self.extensions = frozenset(given) if only_use else \
            frozenset(SOURCE_EXTENSIONS).union(given)

    def __call__(self, filename):
        # type: (SourceTable, str) -> bool
        return find_extension(filename) in self.extensions

    def __repr__(self):
        return 'SourceTable({})'.format(sorted(self.extensions))

    @staticmethod
    def _normalize(extension):
        # type: (str) -> str
        return extension if extension.startswith('.') else '.' + extension


def output_from_source(source, extension):
    # type: (str, str) -> Optional[str]
    """ Work out the output file name the compiler would produce implicitly.

    The compiler writes the implied output into the current directory, so the
    directory part of the source is dropped.

    :param source:      the input source file name
    :param extension:   the new extension, including the dot
    :return: the implied output file name, or None when it can't be derived """

    basename = os.path.basename(source)
    stem, current = os.path.splitext(basename)
    # 'foo.' has an empty extension, '.c' has no stem at all
    if not stem or len(current) < 2:
        logging.info('source file %s is bogus', source)
        return None
    return stem + extension
