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
import argparse
from . import __version__, set_debug
from .errors import SaveConvertError, UnknownRegion
from .savegame import Savegame, Region
from .treasures import TreasureTable


# Names the user can give for each region on the commandline.  Note that
# "e" is PAL (Europe) here, even though the savegame itself stores US as
# 'E'.
REGION_ALIASES = {
        'j': Region.JP,
        'jp': Region.JP,
        'jpn': Region.JP,
        'ntsc-j': Region.JP,
        'ntsc_j': Region.JP,
        'u': Region.US,
        'us': Region.US,
        'usa': Region.US,
        'ntsc-u': Region.US,
        'ntsc_u': Region.US,
        'p': Region.PAL,
        'e': Region.PAL,
        'pal': Region.PAL,
        'eur': Region.PAL,
        }


def parse_region(text):
    """
    Converts a user-supplied region name into a `Region`, case-insensitively.
    Raises `UnknownRegion` for anything we don't recognize.
    """
    try:
        return REGION_ALIASES[text.strip().lower()]
    except KeyError:
        raise UnknownRegion(f'Invalid region: {text}') from None


def default_output_filename(input_filename, region):
    """
    Output filename to use when the user doesn't specify one: the input
    filename's stem plus the target region, in the same directory as the
    input file.  `foo/pikmin.gci` converted to PAL becomes `foo/pikmin-PAL.gci`.
    """
    dirname, basename = os.path.split(input_filename)
    stem, _ = os.path.splitext(basename)
    return os.path.join(dirname, f'{stem}-{region.name}.gci')


class RegionAction(argparse.Action):
    """
    Argparse action to convert a region name into a `Region`
    """

    def __call__(self, parser, namespace, value, option_string):
        try:
            setattr(namespace, self.dest, parse_region(value))
        except UnknownRegion:
            raise parser.error(f'{option_string}: unknown region "{value}" (try one of: us, jp, pal)')


class PokoAction(argparse.Action):
    """
    Argparse action to collect manual Poko totals.  Exactly one value per
    save slot is required, each of which must fit in an unsigned 32-bit int.
    """

    def __call__(self, parser, namespace, values, option_string):
        if len(values) != Savegame.NUM_SLOTS:
            raise parser.error(f'Must supply exactly {Savegame.NUM_SLOTS} values if using {option_string}')
        try:
            counts = [int(v) for v in values]
        except ValueError:
            raise parser.error(f'{option_string} values must be numbers')
        for count in counts:
            if count < 0 or count > 0xFFFFFFFF:
                raise parser.error(f'{option_string} values must be between 0 and {0xFFFFFFFF}')
        setattr(namespace, self.dest, counts)


def print_info(save):
    """
    Prints a summary of the savegame
    """
    header = f'Pikmin 2 Savegame ({save.filename})'
    print(header)
    print('-'*len(header))
    print(f'(processed by p2saveconvert v{__version__})')
    print('')
    if save.region.choice is None:
        print(f' - Region: unknown (0x{save.region.value:02X})')
    else:
        print(f' - Region: {save.region}')
    for index, slot in enumerate(save.slots):
        if slot is None:
            print(f' - Slot {index}: empty')
            continue
        if slot.checksum_valid:
            checksum_status = 'valid'
        else:
            checksum_status = 'INVALID'
        print(f' - Slot {index} (at 0x{slot.offset:X}):')
        print(f'   - Pokos: {slot.pokos} (displayed: {slot.displayed_pokos})')
        print(f'   - Treasures Collected: {len(slot.treasures.collected())}/{len(slot.treasures)}')
        print(f'   - Checksum: {slot.checksum} ({checksum_status})')
    print('')


def main(argv=None):
    """
    Main CLI app.  Returns `True` if a file was saved out, or `False`
    otherwise.  Conversion errors are reported on stderr and exit with
    status 1.
    """

    parser = argparse.ArgumentParser(
            description=f'Pikmin 2 Savegame Region Converter v{__version__}',
            )

    parser.add_argument('--version',
            action='version',
            version=f'%(prog)s {__version__}',
            )

    control = parser.add_argument_group('Control Arguments', 'General control of the conversion process')

    control.add_argument('-i', '--info',
            action='store_true',
            help='Show known information about the save',
            )

    control.add_argument('-d', '--debug',
            action='store_true',
            help="""
                Show debugging output, which will show the offsets (both absolute and relative) for
                all data in the savegame we know about.  This info will be written to stderr.
                """,
            )

    conversion = parser.add_argument_group('Conversion', 'Options for the region conversion itself')

    conversion.add_argument('-r', '--set-region',
            action=RegionAction,
            metavar='REGION',
            help="""
                Region to convert the savegame to.  Accepts us/usa/ntsc-u, jp/jpn/ntsc-j, or
                pal/eur/e/p (case-insensitive).
                """,
            )

    conversion.add_argument('-t', '--treasure-values',
            type=str,
            metavar='FILENAME',
            help="""
                JSON file containing the per-region Poko value of each treasure, ordered
                US, PAL, JP.  Required unless --set-pokos is used.
                """,
            )

    conversion.add_argument('-p', '--set-pokos',
            action=PokoAction,
            nargs='+',
            metavar='POKOS',
            help="""
                Manually set the Poko values for each of the three save slots, instead of
                recalculating them based on which treasures have been collected.  Must supply
                exactly 3 values.  Only the actual Poko total is changed, not the displayed one.
                """,
            )

    parser.add_argument('input_file',
            type=str,
            help='Savegame (.gci) to convert',
            )

    parser.add_argument('output_file',
            type=str,
            nargs='?',
            help="""
                Where to save the converted savegame.  If not supplied, it will be saved in the
                same directory as the input file with the region appended to the filename.
                """,
            )

    # Parse args and check that they make sense together
    args = parser.parse_args(argv)
    if args.set_region is None and not args.info:
        parser.error('No region to convert to was specified (use -r/--set-region, or -i/--info to just view)')
    if args.set_region is not None and args.set_pokos is None and args.treasure_values is None:
        parser.error('A treasure value table (-t/--treasure-values) is required unless --set-pokos is used')
    if args.debug:
        set_debug()

    try:
        table = None
        if args.set_region is not None and args.set_pokos is None:
            table = TreasureTable.from_file(args.treasure_values)

        # Load the savegame
        if args.debug:
            print('Showing data offsets:', file=sys.stderr)
            print('', file=sys.stderr)
        save = Savegame(args.input_file)
        if args.debug:
            print('', file=sys.stderr)

        if args.info:
            print_info(save)

        if args.set_region is None:
            return False

        if args.set_pokos is not None:
            save.set_pokos_manually(args.set_pokos)
            for slot in save.present_slots:
                print(f'Set Pokos in slot {slot.index} to {args.set_pokos[slot.index]}')
        else:
            for slot, old_pokos, new_pokos in save.recalculate_pokos(args.set_region, table):
                print(f'Recalculated Pokos in slot {slot.index}. Old: {old_pokos}. New: {new_pokos}')

        save.set_region(args.set_region)

        if args.output_file is None:
            output_file = default_output_filename(args.input_file, args.set_region)
        else:
            output_file = args.output_file
        save.save(output_file)
        print(f'Wrote converted save file to {output_file}')
        return True

    except SaveConvertError as e:
        print(f'ERROR: {e}', file=sys.stderr)
        sys.exit(1)

if __name__ == '__main__':
    main()
