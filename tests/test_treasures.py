"""Tests for loading the treasure value table."""

import json

import pytest

from p2saveconvert.errors import TreasureTableError
from p2saveconvert.savegame import Region
from p2saveconvert.treasures import TreasureTable, NUM_TREASURES

from conftest import default_values


class TestTreasureTable:
    def test_lookup_by_region(self):
        table = TreasureTable(default_values())
        assert len(table) == NUM_TREASURES
        assert table[0] == (50, 40, 45)
        assert table.value(0, Region.US) == 50
        assert table.value(0, Region.PAL) == 40
        assert table.value(0, Region.JP) == 45

    def test_from_list_file(self, values_file):
        table = TreasureTable.from_file(values_file)
        assert table.value(187, Region.PAL) == 187*5+10

    def test_from_dict(self):
        data = {str(idx): entry for idx, entry in enumerate(default_values())}
        table = TreasureTable.from_json_data(data)
        assert table[0] == (50, 40, 45)
        assert table[10] == (50, 60, 30)

    def test_dict_missing_id(self):
        data = {str(idx): entry for idx, entry in enumerate(default_values())}
        del data['42']
        with pytest.raises(TreasureTableError, match='42'):
            TreasureTable.from_json_data(data)

    def test_dict_extra_id(self):
        data = {str(idx): entry for idx, entry in enumerate(default_values())}
        data['188'] = [1, 2, 3]
        with pytest.raises(TreasureTableError):
            TreasureTable.from_json_data(data)

    def test_wrong_length(self):
        with pytest.raises(TreasureTableError):
            TreasureTable(default_values()[:-1])

    @pytest.mark.parametrize('entry', [[1, 2], [1, 2, 3, 4], 7, [1, 'two', 3], [1.5, 2, 3], [True, 2, 3]])
    def test_bad_entry(self, entry):
        values = default_values()
        values[3] = entry
        with pytest.raises(TreasureTableError):
            TreasureTable(values)

    def test_not_a_container(self):
        with pytest.raises(TreasureTableError):
            TreasureTable.from_json_data('nope')

    def test_missing_file(self, tmp_path):
        with pytest.raises(TreasureTableError):
            TreasureTable.from_file(str(tmp_path / 'missing.json'))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text('[[1, 2, 3],')
        with pytest.raises(TreasureTableError):
            TreasureTable.from_file(str(path))

    def test_reads_utf8(self, tmp_path):
        values = default_values()
        values[7] = [1, 'Pokémon', 3]
        path = tmp_path / 'utf8.json'
        path.write_text(json.dumps(values, ensure_ascii=False), encoding='utf-8')
        with pytest.raises(TreasureTableError, match='Pokémon'):
            TreasureTable.from_file(str(path))

    def test_negative_values_allowed(self, tmp_path):
        values = default_values()
        values[0] = [-5, 0, 5]
        path = tmp_path / 'neg.json'
        path.write_text(json.dumps(values))
        assert TreasureTable.from_file(str(path))[0] == (-5, 0, 5)
