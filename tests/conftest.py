import json
import struct

import pytest

from p2saveconvert import set_debug
from p2saveconvert.savegame import Savegame, Slot
from p2saveconvert.treasures import NUM_TREASURES


# Where our synthetic images put each slot.  Real memory card images have
# the slots somewhere past the .gci header; the exact spot doesn't matter
# since they're located by signature.
SLOT_OFFSETS = [0x2040, 0xE040, 0x1A040]

ACTUAL_POKOS = 0x834
DISPLAYED_POKOS = 0x2C
TREASURE_LIST = 0x4CF


def build_image(region=b'E', slots=None):
    """
    Builds an in-memory memory card image.  `slots` maps a slot index to a
    dict with optional `pokos`, `displayed` and `collected` (a list of
    treasure IDs) keys.
    """
    data = bytearray(Savegame.TOTAL_BYTES)
    data[Savegame.REGION_OFFSET] = region[0]
    for index, info in (slots or {}).items():
        base = SLOT_OFFSETS[index]
        data[base:base+9] = Savegame.SLOT_MAGIC + bytes([index])
        pokos = info.get('pokos', 0)
        struct.pack_into('>i', data, base+ACTUAL_POKOS, pokos)
        struct.pack_into('>i', data, base+DISPLAYED_POKOS, info.get('displayed', pokos))
        for treasure_id in info.get('collected', []):
            data[base+TREASURE_LIST+treasure_id] = 1
        # A bit of filler so the checksum has something to chew on
        data[base+0x100:base+0x110] = bytes(range(index, index+16))
    return data


def slot_int(data, index, field, fmt='>i'):
    return struct.unpack_from(fmt, data, SLOT_OFFSETS[index]+field)[0]


def default_values():
    """
    Treasure values for tests.  Treasure 0 is worth 50/40/45 (US/PAL/JP);
    the rest are arbitrary but differ between regions.
    """
    values = [[50, 40, 45]]
    for treasure_id in range(1, NUM_TREASURES):
        values.append([treasure_id*5, treasure_id*5+10, treasure_id*3])
    return values


@pytest.fixture(autouse=True)
def reset_debug():
    yield
    set_debug(False)


@pytest.fixture
def write_image(tmp_path):
    """
    Returns a function which writes image data to a file in `tmp_path` and
    returns the filename
    """
    def _write(data, name='pikmin.gci'):
        path = tmp_path / name
        path.write_bytes(bytes(data))
        return str(path)
    return _write


@pytest.fixture
def values_file(tmp_path):
    path = tmp_path / 'treasures.json'
    path.write_text(json.dumps(default_values()))
    return str(path)
