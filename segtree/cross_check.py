"""
Randomized equivalence check between `EfficientSegmentTree` and the
`NaiveSegmentTree` reference.

Both trees are built over the same random values, then receive the same
random sequence of point updates and range folds. Every fold and every
read-after-write is compared.

    python -m segtree.cross_check --combiner concat --size 37 --num-ops 5000
"""
import operator

import numpy as np

from segtree import logger
from segtree.cmd_util import cross_check_arg_parser
from segtree.misc_util import set_global_seeds
from segtree.segment_tree import EfficientSegmentTree, NaiveSegmentTree


def _int_sampler(rng):
    return int(rng.randint(-100, 100))


def _float_sampler(rng):
    return float(rng.uniform(-1e3, 1e3))


def _letter_sampler(rng):
    return chr(ord('a') + int(rng.randint(26)))


# name -> (combine, identity, sampler)
PRESETS = {
    'sum': (operator.add, 0, _int_sampler),
    'min': (min, float('inf'), _float_sampler),
    'max': (max, float('-inf'), _float_sampler),
    # associative but not commutative
    'concat': (operator.add, '', _letter_sampler),
}


def _report_mismatch(msg, raise_on_mismatch):
    logger.warn(msg)
    if raise_on_mismatch:
        raise AssertionError(msg)


def cross_check(size, num_ops, combine, identity, sampler, seed=None, raise_on_mismatch=True):
    """
    Apply the same random operations to an efficient and a naive segment tree and compare them.

    :param size: (int) number of positions in both trees
    :param num_ops: (int) number of random operations, each one a `set` or a `fold` with equal probability
    :param combine: (lambda obj, obj -> obj) associative operation for combining elements
    :param identity: (obj) seed of every fold
    :param sampler: (lambda np.random.RandomState -> obj) draws a random element value
    :param seed: (int) seed of the operation stream, None for a random one
    :param raise_on_mismatch: (bool) raise an AssertionError on the first mismatch instead of only logging it
    :return: (dict) counters 'sets', 'folds' and 'mismatches'
    """
    rng = np.random.RandomState(seed)
    values = [sampler(rng) for _ in range(size)]
    efficient = EfficientSegmentTree(values, combine)
    naive = NaiveSegmentTree(values, combine)
    stats = {'sets': 0, 'folds': 0, 'mismatches': 0}

    for _ in range(num_ops):
        if rng.rand() < 0.5:
            idx = int(rng.randint(size))
            value = sampler(rng)
            with logger.ProfileKV('efficient_set'):
                efficient.set(idx, value)
            naive.set(idx, value)
            stats['sets'] += 1
            if efficient.get(idx) != naive.get(idx):
                stats['mismatches'] += 1
                _report_mismatch('get({}) after set: efficient={!r} naive={!r}'.format(
                    idx, efficient.get(idx), naive.get(idx)), raise_on_mismatch)
        else:
            start = int(rng.randint(size))
            end = int(rng.randint(start, size))
            with logger.ProfileKV('efficient_fold'):
                actual = efficient.fold(identity, start, end)
            with logger.ProfileKV('naive_fold'):
                expected = naive.fold(identity, start, end)
            stats['folds'] += 1
            if actual != expected:
                stats['mismatches'] += 1
                _report_mismatch('fold({}, {}): efficient={!r} naive={!r}'.format(
                    start, end, actual, expected), raise_on_mismatch)

    logger.debug('cross-checked', stats['sets'], 'sets and', stats['folds'], 'folds over', size, 'positions')
    return stats


def cross_check_preset(name, size, num_ops, seed=None, raise_on_mismatch=True):
    """
    Run `cross_check` with one of the named combiners of `PRESETS`

    :param name: (str) 'sum', 'min', 'max' or 'concat'
    :param size: (int) number of positions in both trees
    :param num_ops: (int) number of random operations
    :param seed: (int) seed of the operation stream
    :param raise_on_mismatch: (bool) raise an AssertionError on the first mismatch
    :return: (dict) counters 'sets', 'folds' and 'mismatches'
    """
    if name not in PRESETS:
        raise ValueError('Unknown combiner specified: %s' % (name,))
    combine, identity, sampler = PRESETS[name]
    return cross_check(size, num_ops, combine, identity, sampler, seed=seed, raise_on_mismatch=raise_on_mismatch)


def main(args=None):
    """
    Runs the cross-check from the command line
    """
    args = cross_check_arg_parser().parse_args(args)
    set_global_seeds(args.seed)
    with logger.ScopedConfigure(format_strs=args.log_format.split(',')):
        stats = cross_check_preset(args.combiner, args.size, args.num_ops, seed=args.seed,
                                   raise_on_mismatch=args.raise_on_mismatch)
        logger.logkv('combiner', args.combiner)
        logger.logkv('size', args.size)
        logger.logkvs(stats)
        logger.dumpkvs()
    return stats


if __name__ == '__main__':
    main()
