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

import json

from .errors import TreasureTableError

# Per-region treasure values.  The actual numbers aren't shipped with the
# app; they're read from a JSON file, either as a plain list indexed by
# treasure ID:
#
#     [[100, 100, 100], [35, 35, 40], ...]
#
# or as an object keyed by (stringified) treasure ID:
#
#     {"0": [100, 100, 100], "1": [35, 35, 40], ...}
#
# Each entry is ordered US, PAL, JP.  That ordering is what
# `Region.to_value_index()` indexes into, and is *not* the order the
# regions are declared in.

NUM_TREASURES = 188


class TreasureTable():
    """
    Read-only mapping of treasure ID to its `(US, PAL, JP)` Poko values
    """

    def __init__(self, values):
        """
        `values` should be a sequence of exactly `NUM_TREASURES` 3-element
        integer sequences, indexed by treasure ID.
        """
        if len(values) != NUM_TREASURES:
            raise TreasureTableError(f'Treasure table must have {NUM_TREASURES} entries, found {len(values)}')
        self._values = []
        for treasure_id, entry in enumerate(values):
            if not isinstance(entry, (list, tuple)) or len(entry) != 3:
                raise TreasureTableError(f'Treasure {treasure_id} must have exactly 3 values (US, PAL, JP)')
            for value in entry:
                # bool is an int subclass, but true/false in the table is
                # almost certainly a mistake
                if type(value) != int:
                    raise TreasureTableError(f'Treasure {treasure_id} has a non-integer value: {value!r}')
            self._values.append(tuple(entry))

    @staticmethod
    def from_file(filename):
        """
        Loads a table from the JSON file `filename`
        """
        try:
            with open(filename, encoding='utf-8') as df:
                data = json.load(df)
        except OSError as e:
            raise TreasureTableError(f'Could not read treasure table {filename}: {e.strerror}') from e
        except json.JSONDecodeError as e:
            raise TreasureTableError(f'Treasure table {filename} is not valid JSON: {e}') from e
        return TreasureTable.from_json_data(data)

    @staticmethod
    def from_json_data(data):
        """
        Builds a table out of already-decoded JSON data (either a list, or a
        dict keyed by treasure ID)
        """
        if isinstance(data, dict):
            values = []
            for treasure_id in range(NUM_TREASURES):
                try:
                    values.append(data[str(treasure_id)])
                except KeyError:
                    raise TreasureTableError(f'Treasure table is missing treasure {treasure_id}')
            if len(data) != NUM_TREASURES:
                raise TreasureTableError(f'Treasure table must have {NUM_TREASURES} entries, found {len(data)}')
            return TreasureTable(values)
        elif isinstance(data, list):
            return TreasureTable(data)
        else:
            raise TreasureTableError('Treasure table must be a JSON list or object')

    def __len__(self):
        return len(self._values)

    def __getitem__(self, treasure_id):
        return self._values[treasure_id]

    def value(self, treasure_id, region):
        """
        Returns the value of `treasure_id` in the given `Region`
        """
        return self._values[treasure_id][region.to_value_index()]
