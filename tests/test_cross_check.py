import operator

import pytest

from segtree import logger
from segtree.cross_check import PRESETS, cross_check, cross_check_preset, main


@pytest.mark.parametrize('name', sorted(PRESETS))
@pytest.mark.parametrize('size', [1, 2, 7, 64, 100])
def test_presets_agree(name, size):
    """
    test the efficient tree against the naive one for every preset combiner
    """
    stats = cross_check_preset(name, size, 500, seed=size)
    assert stats['mismatches'] == 0
    assert stats['sets'] + stats['folds'] == 500


@pytest.mark.expensive
@pytest.mark.parametrize('name', sorted(PRESETS))
def test_presets_agree_large(name):
    stats = cross_check_preset(name, 1023, 20000, seed=0)
    assert stats['mismatches'] == 0


def _broken_combine(left, right):
    # not associative
    return left - right


def test_mismatch_detected():
    with pytest.raises(AssertionError):
        cross_check(9, 200, _broken_combine, 0, lambda rng: int(rng.randint(1, 10)), seed=0)

    stats = cross_check(9, 200, _broken_combine, 0, lambda rng: int(rng.randint(1, 10)), seed=0,
                        raise_on_mismatch=False)
    assert stats['mismatches'] > 0


def test_unknown_preset():
    with pytest.raises(ValueError):
        cross_check_preset('dummy_combiner', 10, 10)


def test_same_seed_same_stream():
    first = cross_check(16, 300, operator.add, 0, lambda rng: int(rng.randint(100)), seed=3)
    second = cross_check(16, 300, operator.add, 0, lambda rng: int(rng.randint(100)), seed=3)
    assert first == second


def test_main(tmp_path, monkeypatch):
    """
    Dry-run python -m segtree.cross_check
    """
    monkeypatch.setenv('SEGTREE_LOGDIR', str(tmp_path))
    stats = main(['--combiner', 'concat', '--size', '13', '--num-ops', '200', '--seed', '1',
                  '--log-format', 'csv'])
    assert stats['mismatches'] == 0
    assert logger.Logger.CURRENT is logger.Logger.DEFAULT
    with open(str(tmp_path / 'progress.csv'), 'rt') as file_handler:
        header = file_handler.readline().strip().split(',')
    assert {'combiner', 'size', 'sets', 'folds', 'mismatches', 'wait_efficient_fold'} <= set(header)


def test_main_failure_restores_logger(tmp_path, monkeypatch):
    """
    a failing run still closes its writers and puts the previous logger back
    """
    monkeypatch.setenv('SEGTREE_LOGDIR', str(tmp_path))
    with pytest.raises(ValueError):
        main(['--size', '0', '--log-format', 'csv'])
    assert logger.Logger.CURRENT is logger.Logger.DEFAULT
