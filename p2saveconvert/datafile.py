#!/usr/bin/env python3
# vim: set expandtab tabstop=4 shiftwidth=4:

# Copyright (C) 2026 The p2saveconvert contributors
#
# p2saveconvert is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>

import os
import sys
import enum
import struct
import collections

from . import is_debug

# "Generic" data processing for GameCube memory card images.  Fields can be
# defined either in-line with each other (in which case there's no need to
# pass in an explicit offset), or by specifying an offset which is
# *relative* to the parent's offset.
#
# Everything operates on a single in-memory `io.BytesIO` owned by the
# top-level savegame object; data objects only ever remember an offset into
# that buffer, so a slot is really just "an offset plus some fields."
#
# The GameCube is big-endian, so all our numeric packing is too.


class Bounds(enum.Enum):
    """
    Types of bounds that we'll check for
    """

    SIGNED = enum.auto()
    UNSIGNED = enum.auto()


# Low-level datatypes we'll be reading from the save file
NumType = collections.namedtuple('NumType', ['num_bytes', 'struct_char', 'bounds'])
UInt8 =  NumType(1, 'B', Bounds.UNSIGNED)
UInt16 = NumType(2, 'H', Bounds.UNSIGNED)
UInt32 = NumType(4, 'I', Bounds.UNSIGNED)
Int32 =  NumType(4, 'i', Bounds.SIGNED)


class Data():
    """
    Base data class to handle knowing where the data is.  The `parent` object
    should have a file-like `df` attribute pointing to the in-memory buffer,
    and an `offset` attribute, though that's only actually used if `offset`
    is passed in to here.  If no `offset` is passed in, the position for this
    data element will be the current position of the filehandle.

    Note that the constructor will automatically seek to the start of the
    data, after doing any offset computation, so that the data can then be
    read by the implementing classes.
    """

    def __init__(self, debug_label, parent, /, offset=None):
        self.debug_label = debug_label
        self.parent = parent
        self.__indent = None
        self.df = self.parent.df
        if offset is None:
            self.offset = self.df.tell()
        else:
            self.offset = offset
            if self.parent is not None:
                self.offset += self.parent.offset
            self.df.seek(self.offset, os.SEEK_SET)

        # If we've been told to go into debug mode, show our offsets
        if is_debug():
            report = []
            absolute = self.offset
            report.append(f'0x{absolute:X} absolute')
            if self.parent is not None:
                relative = self.offset - self.parent.offset
                if relative != absolute:
                    report.append(f'0x{relative:X} from {self.parent.debug_label}')
            print('{}- {}:\t{}'.format(
                '  '*self._indent,
                self.debug_label,
                ",\t".join(report),
                ), file=sys.stderr)

    @property
    def _indent(self):
        """
        Used for our debug output; determines the indentation so that we can
        report on offsets in a tree-like fashion
        """
        if self.__indent is None:
            self.__indent = 0
            cur = self
            while True:
                try:
                    cur = cur.parent
                    if cur is None:
                        break
                    self.__indent += 1
                except AttributeError:
                    break
        return self.__indent

    def read_raw(self, length, relative_offset=0):
        """
        Returns `length` raw bytes starting at our offset (plus an optional
        `relative_offset`).  Leaves the filehandle positioned after the
        data that was read.
        """
        self.df.seek(self.offset + relative_offset, os.SEEK_SET)
        return self.df.read(length)


class NumData(Data):
    """
    Class to handle numeric data in the savegame.  The only additional
    argument is `num_type`, which should be a `NumType` object describing
    the on-disk format.

    Access to the raw data is via the `value` attribute, which is
    wrapped up in a property.  For just printing/formatting the data
    you should be able to omit `.value`, but to set the value you'll
    need to go through `.value`, which performs bounds checking to make
    sure we don't exceed the byte count for the data type.
    """

    def __init__(self, debug_label, parent, num_type, /, offset=None):
        super().__init__(debug_label, parent, offset=offset)
        self.num_type = num_type
        self.struct_string = f'>{self.num_type.struct_char}'
        match self.num_type.bounds:
            case Bounds.SIGNED:
                self.max_value = 2**((self.num_type.num_bytes*8)-1)-1
                self.min_value = -(2**((self.num_type.num_bytes*8)-1))
            case Bounds.UNSIGNED:
                self.max_value = 2**(self.num_type.num_bytes*8)-1
                self.min_value = 0
        self._value = None
        self.refresh()

    def refresh(self):
        """
        Re-reads our value from the buffer.  Only really needed when the same
        bytes are mapped by more than one data object and one of the *other*
        ones has been written to.
        """
        self.df.seek(self.offset, os.SEEK_SET)
        self._value = struct.unpack(self.struct_string, self.df.read(self.num_type.num_bytes))[0]
        self._post_value_set()

    @property
    def value(self):
        """
        Returns our raw value.
        """
        return self._value

    @value.setter
    def value(self, new_value):
        """
        Sets our new value, potentially doing bounds checking at the same time.
        Will raise a `ValueError` if the bounds have been exceeded.
        """
        if new_value < self.min_value:
            raise ValueError(f'Minimum value is {self.min_value}')
        if new_value > self.max_value:
            raise ValueError(f'Maximum value is {self.max_value}')
        self.df.seek(self.offset, os.SEEK_SET)
        self.df.write(struct.pack(self.struct_string, new_value))
        self._value = new_value
        self._post_value_set()

    def _post_value_set(self):
        """
        Any actions which need to be performed after setting our value.  Empty for
        this class but can be implemented in subclasses.
        """
        pass

    @property
    def label(self):
        """
        Returns an appropriate "label" for the data, which for this base class is
        just the raw data itself.
        """
        return self.value

    def __str__(self):
        return str(self.label)

    def __format__(self, format_str):
        """
        Support for using this class inside format strings.
        """
        format_str = '{:' + format_str + '}'
        return format_str.format(self.label)

    def __eq__(self, other):
        """
        Compare using our `value` attribute.  This should allow us to test for
        equality versus other `NumData` objects, or by raw numeric values.
        """
        if issubclass(type(other), NumData):
            return self.value == other.value
        else:
            return self.value == other


class LabelEnum(enum.Enum):
    """
    A custom Enum class which, in addition to the usual `value`, also has
    a `label` field intended to be shown to the user in implementing UIs.
    """

    def __new__(cls, value, label):
        obj = object.__new__(cls)
        obj._value_ = value
        obj.label = label
        return obj

    def __str__(self):
        """
        String representation will be the label, not the value
        """
        return self.label


class NumChoiceData(NumData):
    """
    Numeric data which is (at least theoretically) constrained to a set of
    known data, defined via a `LabelEnum` class whose values are the numeric
    save data.  The region byte in the memory card header is the main
    example.

    This class does *not* force the value to be a member of the specified
    choices; `choice` will just be `None` for unknown data, and it's up to
    the caller to decide whether that's an error.
    """

    def __init__(self, debug_label, parent, num_type, choices, /, offset=None):
        self.choices = choices
        self.choice = None
        super().__init__(debug_label, parent, num_type, offset=offset)

    @NumData.value.setter
    def value(self, new_value):
        """
        Sets our raw data.  `new_value` can either be the raw numeric value, or
        an instance of `self.choices`.
        """
        if isinstance(new_value, self.choices):
            new_value = new_value.value
        # `super().value = new_value` doesn't work for property setters:
        # https://github.com/python/cpython/issues/59170
        super(NumChoiceData, NumChoiceData).value.fset(self, new_value)

    def _post_value_set(self):
        """
        Populates `self.choice` if the numeric data is contained within
        `self.choices`.
        """
        try:
            self.choice = self.choices(self.value)
        except ValueError:
            self.choice = None

    @property
    def label(self):
        if self.choice is None:
            return self.value
        else:
            return self.choice.label

    def __eq__(self, other):
        """
        Compare using our `value` attribute, versus other `NumData` objects,
        `LabelEnum` members, or raw numeric values.
        """
        if issubclass(type(other), NumData):
            return self.value == other.value
        elif issubclass(type(other), LabelEnum):
            return self.value == other.value
        else:
            return self.value == other
