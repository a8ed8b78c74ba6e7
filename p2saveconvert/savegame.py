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

import io
import struct

from .datafile import UInt8, UInt16, UInt32, Int32, \
        Data, NumData, NumChoiceData, LabelEnum
from .errors import LengthMismatch, UnknownRegion, RegionUnchanged, \
        DestinationExists, WriteError, MalformedOverrideCount, PokoOverflow

# Pikmin 2 memory card (.gci) savegame description / format


class Region(LabelEnum):
    """
    Game region.  The enum value is the byte stored at offset 3 of the
    memory card image.
    """

    US =  (ord('E'), 'US')
    JP =  (ord('J'), 'JP')
    PAL = (ord('P'), 'PAL')

    def to_byte(self):
        return self.value

    @classmethod
    def from_byte(cls, byte):
        """
        Returns the Region stored as `byte`, raising `UnknownRegion` if
        it's not one we know about.
        """
        try:
            return cls(byte)
        except ValueError:
            raise UnknownRegion(f'Invalid region in savegame: {byte!r}') from None

    def to_value_index(self):
        """
        Returns the column to use in the treasure value table for this region
        """
        return REGION_VALUE_INDEX[self]


# The treasure value table is laid out US, PAL, JP, which isn't the order
# the enum is declared in.  Keep this explicit.
REGION_VALUE_INDEX = {
        Region.US: 0,
        Region.PAL: 1,
        Region.JP: 2,
        }


def compute_checksum(payload):
    """
    Computes the two 16-bit checksum accumulators for the given slot
    `payload`, returning a `(c1, c2)` tuple.  The payload is read as a series
    of big-endian u16s; `c1` sums the words and `c2` sums their complements.
    Either accumulator ending up at 0xFFFF is stored as 0 instead.
    """
    if len(payload) % 2 != 0:
        raise ValueError('Checksum payload must be an even number of bytes')
    c1 = 0
    c2 = 0
    for (word,) in struct.iter_unpack('>H', payload):
        c1 = (c1 + word) & 0xFFFF
        c2 = (c2 + (~word & 0xFFFF)) & 0xFFFF
    if c1 == 0xFFFF:
        c1 = 0
    if c2 == 0xFFFF:
        c2 = 0
    return c1, c2


class Treasures(Data):
    """
    Collection status for every treasure in the game.  One byte apiece,
    indexed by treasure ID; anything nonzero means the treasure's been
    collected.
    """

    NUM_TREASURES = 188

    def __init__(self, debug_label, parent, offset=None):
        super().__init__(debug_label, parent, offset=offset)
        self._treasures = []
        for idx in range(Treasures.NUM_TREASURES):
            self._treasures.append(NumData(f'Treasure {idx}', self, UInt8))

    def __iter__(self):
        return iter(self._treasures)

    def __len__(self):
        return len(self._treasures)

    def collected(self):
        """
        Returns a list of the IDs of all collected treasures
        """
        return [idx for idx, status in enumerate(self) if status.value != 0]


class Checksum(Data):
    """
    The checksum trailer at the end of each slot: two u16s
    """

    def __init__(self, debug_label, parent, offset=None):
        super().__init__(debug_label, parent, offset=offset)
        self.c1 = NumData('Checksum 1', self, UInt16)
        self.c2 = NumData('Checksum 2', self, UInt16)

    def __str__(self):
        return f'0x{self.c1.value:04X} 0x{self.c2.value:04X}'


class Slot(Data):
    """
    A savegame slot.  Each slot is a fixed-size chunk which starts with an
    8-byte signature followed by the slot index, and ends with a checksum
    covering everything before it.
    """

    TOTAL_BYTES = 0xC000
    CHECKSUM_OFFSET = 0xBFFC

    def __init__(self, debug_label, parent, index, offset):
        super().__init__(debug_label, parent, offset=offset)
        self.savegame = self.parent
        self.index = index
        self._parse()

    def _parse(self):
        """
        Parses our slot structure
        """
        self.displayed_pokos = NumData('Displayed Pokos', self, Int32, 0x2C)
        self.treasures = Treasures('Treasures', self, 0x4CF)

        # Two views of the same four bytes: the game treats this as signed,
        # but manually-specified totals are written unsigned.
        self.pokos = NumData('Pokos', self, Int32, 0x834)
        self.pokos_unsigned = NumData('Pokos (unsigned)', self, UInt32, 0x834)

        self.checksum = Checksum('Checksum', self, Slot.CHECKSUM_OFFSET)

    def recalculate_pokos(self, origin, destination, table):
        """
        Converts our Poko total from the `origin` Region's treasure values to
        the `destination` Region's, using the `TreasureTable` `table`.  Both
        the actual and displayed totals are set.  Returns a tuple of the old
        and new totals.
        """
        old_pokos = self.pokos.value
        new_pokos = old_pokos
        for treasure_id in self.treasures.collected():
            new_pokos -= table.value(treasure_id, origin)
            new_pokos += table.value(treasure_id, destination)
        if new_pokos < self.pokos.min_value or new_pokos > self.pokos.max_value:
            raise PokoOverflow(f'Slot {self.index}: recalculated Poko total {new_pokos} is out of range')
        self.pokos.value = new_pokos
        self.pokos_unsigned.refresh()
        self.displayed_pokos.value = new_pokos
        return old_pokos, new_pokos

    def set_pokos(self, count):
        """
        Sets our actual Poko total to an arbitrary unsigned value.  The
        displayed total is left alone.
        """
        self.pokos_unsigned.value = count
        self.pokos.refresh()

    def compute_checksum(self):
        return compute_checksum(self.read_raw(Slot.CHECKSUM_OFFSET))

    @property
    def checksum_valid(self):
        """
        Whether the stored checksum matches our current data
        """
        return self.compute_checksum() == (self.checksum.c1.value, self.checksum.c2.value)

    def update_checksum(self):
        """
        Recomputes our checksum and stores it in the trailer
        """
        c1, c2 = self.compute_checksum()
        self.checksum.c1.value = c1
        self.checksum.c2.value = c2


class Savegame():
    """
    The memory card image itself.  The file size is fixed (221,248 bytes).
    The region is stored as a single byte in the image header, and then up to
    three save slots live somewhere after that.  We find the slots by looking
    for their signature rather than hardcoding offsets.

    The whole file is loaded into an in-memory `io.BytesIO` object and all
    edits happen there; nothing touches disk until `save()`.
    """

    TOTAL_BYTES = 221_248
    REGION_OFFSET = 0x3
    SLOT_MAGIC = b'PlVa0003'
    NUM_SLOTS = 3

    def __init__(self, filename):
        """
        Load in an existing savegame from the file `filename`.  Raises
        `LengthMismatch` if the file isn't exactly the right size, or if it
        can't be read.
        """
        self.filename = filename
        try:
            with open(self.filename, 'rb') as read_df:
                data = read_df.read()
        except OSError as e:
            raise LengthMismatch(f'Could not read savegame {filename}: {e.strerror}') from e
        if len(data) != Savegame.TOTAL_BYTES:
            raise LengthMismatch(f'Invalid savegame (wrong length): expected {Savegame.TOTAL_BYTES} bytes, got {len(data)}')
        self.df = io.BytesIO(data)

        # Pretend to be a Data object
        self.debug_label = 'Savegame'
        self.parent = None
        self.offset = 0

        self._read()

    def _read(self):
        """
        Reads in the initial savegame; only really intended to be used once during
        the constructor
        """
        self.region = NumChoiceData('Region', self, UInt8, Region, Savegame.REGION_OFFSET)

        self.slots = []
        for index in range(Savegame.NUM_SLOTS):
            offset = self.find_slot(index)
            if offset is None:
                self.slots.append(None)
            else:
                self.slots.append(Slot(f'Slot {index}', self, index, offset))

    def find_slot(self, index):
        """
        Returns the offset of save slot `index`, or `None` if the slot isn't
        present.  The first match wins.  A signature too close to the end of
        the file to hold a full slot is ignored.
        """
        offset = self.df.getvalue().find(Savegame.SLOT_MAGIC + bytes([index]))
        if offset == -1 or offset + Slot.TOTAL_BYTES > Savegame.TOTAL_BYTES:
            return None
        return offset

    @property
    def present_slots(self):
        return [slot for slot in self.slots if slot is not None]

    @property
    def origin_region(self):
        """
        The Region currently stored in the savegame.  Raises `UnknownRegion`
        if the byte isn't valid.
        """
        return Region.from_byte(self.region.value)

    def recalculate_pokos(self, region, table):
        """
        Recalculates the Poko totals in every present slot for a conversion to
        `region`, using `table` as the treasure values.  This needs to happen
        *before* `set_region()`, since the current region byte is what tells
        us which values the existing totals were based on.

        Returns a list of `(slot, old_total, new_total)` tuples.
        """
        origin = self.origin_region
        results = []
        for slot in self.present_slots:
            old_pokos, new_pokos = slot.recalculate_pokos(origin, region, table)
            results.append((slot, old_pokos, new_pokos))
        return results

    def set_pokos_manually(self, counts):
        """
        Sets the actual Poko total of each present slot to the value at the
        same index in `counts`, which must have exactly three entries.
        """
        if len(counts) != Savegame.NUM_SLOTS:
            raise MalformedOverrideCount(f'Must supply exactly {Savegame.NUM_SLOTS} Poko values, got {len(counts)}')
        for slot in self.present_slots:
            slot.set_pokos(counts[slot.index])

    def set_region(self, region):
        """
        Sets the savegame region.  Raises `RegionUnchanged` if the savegame
        is already in that region.
        """
        if self.region.value == region.to_byte():
            raise RegionUnchanged(f'Savegame already contains {region} save data!')
        self.region.value = region

    def update_checksums(self):
        for slot in self.present_slots:
            slot.update_checksum()

    def save(self, filename):
        """
        Writes the savegame out to `filename`, after recomputing all slot
        checksums.  Will never overwrite an existing file; raises
        `DestinationExists` in that case, or `WriteError` for any other I/O
        problem.
        """
        self.update_checksums()
        try:
            with open(filename, 'xb') as write_df:
                write_df.write(self.df.getvalue())
        except FileExistsError as e:
            raise DestinationExists(f'Output file {filename} already exists') from e
        except OSError as e:
            raise WriteError(f'Could not write {filename}: {e.strerror}') from e
