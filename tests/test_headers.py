"""Every source file carries the project's GPL header."""

import pathlib

import pytest

ROOT = pathlib.Path(__file__).resolve().parent.parent
SOURCES = sorted(ROOT.glob('p2saveconvert/*.py')) + [ROOT / 'p2s.py']


@pytest.mark.parametrize('path', SOURCES, ids=lambda p: p.name)
def test_license_header(path):
    lines = path.read_text(encoding='utf-8').splitlines()
    assert lines[3] == '# Copyright (C) 2026 The p2saveconvert contributors'
    assert lines[5].startswith('# p2saveconvert is free software')
