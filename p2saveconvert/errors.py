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

# Everything in here is fatal to a conversion run; the CLI reports the
# message and bails.


class SaveConvertError(RuntimeError):
    """
    Base class for all savegame conversion errors
    """


class LengthMismatch(SaveConvertError):
    """
    The input file isn't a savegame of the expected size (or couldn't be
    read at all)
    """


class UnknownRegion(SaveConvertError):
    """
    A region byte (or region name) which doesn't map to a known region
    """


class RegionUnchanged(SaveConvertError):
    """
    Raised when asked to convert a savegame to the region it's already in
    """


class DestinationExists(SaveConvertError):
    """
    We never overwrite an existing file
    """


class WriteError(SaveConvertError):
    """
    Some other I/O failure while writing out the converted savegame
    """


class MalformedOverrideCount(SaveConvertError):
    """
    Manual Poko totals must be given for exactly three slots
    """


class PokoOverflow(SaveConvertError):
    """
    A recalculated Poko total no longer fits in the on-disk field
    """


class TreasureTableError(SaveConvertError):
    """
    The treasure value table file couldn't be parsed
    """
