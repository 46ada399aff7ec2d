import operator
from functools import reduce

from segtree import logger


class SegmentTree(object):
    """
    Fixed-size sequence supporting point updates and range folds.

    Can be used as regular array, but with an additional `fold` operation which
    reduces `combine` over a contiguous, inclusive range of items.

    :param values: (iterable) initial values, copied; the size is fixed afterwards
    :param combine: (lambda obj, obj -> obj) associative operation for combining elements (eg. add, min)
    :raises ValueError: if `values` is empty, a tree always has at least one position
    :raises TypeError: if `combine` is not callable
    """

    def __init__(self, values, combine):
        if not callable(combine):
            raise TypeError("combine must be callable, got {!r}".format(combine))
        values = list(values)
        if len(values) == 0:
            raise ValueError("cannot build a segment tree over an empty sequence")
        self._size = len(values)
        self._combine = combine

    @property
    def size(self):
        return self._size

    @property
    def combine(self):
        return self._combine

    def get(self, idx):
        """
        Current value at a position

        :param idx: (int) position in [0, size)
        :return: (obj) the stored value
        """
        raise NotImplementedError

    def set(self, idx, value):
        """
        Replace the value at a position

        :param idx: (int) position in [0, size)
        :param value: (obj) the new value
        """
        raise NotImplementedError

    def fold(self, identity, start=0, end=None):
        """
        Left-to-right reduction of `combine` over the inclusive range [start, end],
        seeded with `identity`:

            combine(...combine(combine(identity, arr[start]), arr[start + 1])..., arr[end])

        :param identity: (obj) seed of the reduction, eg. 0 for add and float('inf') for min
        :param start: (int) first position of the range
        :param end: (int) last position of the range (inclusive), defaults to the last position
        :return: (obj) the reduced value
        """
        raise NotImplementedError

    def _check_index(self, idx):
        idx = operator.index(idx)
        if not 0 <= idx < self._size:
            raise IndexError("index {} out of range for segment tree of size {}".format(idx, self._size))
        return idx

    def _check_range(self, start, end):
        if end is None:
            end = self._size - 1
        start = self._check_index(start)
        end = self._check_index(end)
        if start > end:
            raise ValueError("empty fold range: start {} > end {}".format(start, end))
        return start, end

    def __len__(self):
        return self._size

    def __getitem__(self, idx):
        return self.get(idx)

    def __setitem__(self, idx, value):
        self.set(idx, value)

    def __iter__(self):
        for idx in range(self._size):
            yield self.get(idx)


class EfficientSegmentTree(SegmentTree):
    def __init__(self, values, combine):
        """
        Bottom-up segment tree stored in a flat list of length 2 * size.

        https://codeforces.com/blog/entry/18051

        Index 0 is unused, [1, size) hold internal nodes and [size, 2 * size)
        hold the leaves, so that the leaf of position `i` is `_value[size + i]`
        and the children of node `i` are `2 * i` and `2 * i + 1`. The size does
        not need to be a power of two.

        Costs: O(size) to build, O(1) for `get`, O(log size) for `set` and `fold`.

        Parameters
        ----------
        values: iterable
            initial values, the tree keeps its own copy
        combine: lambda obj, obj -> obj
            associative operation for combining elements (eg. add, min).
            It does not need to be commutative: `fold` keeps the positional order.
        """
        values = list(values)
        super(EfficientSegmentTree, self).__init__(values, combine)
        self._value = [None] * self._size + values
        for idx in range(self._size - 1, 0, -1):
            self._pull(idx)
        logger.debug("built efficient segment tree of size", self._size)

    def _pull(self, idx):
        self._value[idx] = self._combine(self._value[idx << 1], self._value[idx << 1 | 1])

    def get(self, idx):
        return self._value[self._size + self._check_index(idx)]

    def set(self, idx, value):
        # index of the leaf
        idx = self._check_index(idx) + self._size
        self._value[idx] = value
        while idx > 1:
            idx >>= 1
            self._pull(idx)

    def fold(self, identity, start=0, end=None):
        start, end = self._check_range(start, end)
        # nodes taken from the left edge are in increasing position order,
        # nodes taken from the right edge in decreasing order
        left_result = identity
        right_result = None
        has_right = False
        left = start + self._size
        right = end + self._size
        while left <= right:
            if left & 1:
                left_result = self._combine(left_result, self._value[left])
                left += 1
            if not right & 1:
                if has_right:
                    right_result = self._combine(self._value[right], right_result)
                else:
                    right_result = self._value[right]
                    has_right = True
                right -= 1
            left >>= 1
            right >>= 1
        if has_right:
            return self._combine(left_result, right_result)
        return left_result


class NaiveSegmentTree(SegmentTree):
    """
    Reference implementation over a plain list: O(1) `get` and `set`,
    O(end - start + 1) `fold`. Used to cross-check `EfficientSegmentTree`.

    :param values: (iterable) initial values, copied
    :param combine: (lambda obj, obj -> obj) associative operation for combining elements
    """

    def __init__(self, values, combine):
        values = list(values)
        super(NaiveSegmentTree, self).__init__(values, combine)
        self._value = values

    def get(self, idx):
        return self._value[self._check_index(idx)]

    def set(self, idx, value):
        self._value[self._check_index(idx)] = value

    def fold(self, identity, start=0, end=None):
        start, end = self._check_range(start, end)
        return reduce(self._combine, self._value[start:end + 1], identity)


class SumSegmentTree(EfficientSegmentTree):
    def __init__(self, values):
        super(SumSegmentTree, self).__init__(values, operator.add)

    def sum(self, start=0, end=None):
        """Returns arr[start] + ... + arr[end]"""
        return super(SumSegmentTree, self).fold(0, start, end)

    def find_prefixsum_idx(self, prefixsum):
        """
        Find the lowest index `i` in the array such that
            arr[0] + arr[1] + ... + arr[i] > prefixsum
        or the last index if there is none.

        If array values are non-negative weights, this function
        allows to sample indexes according to the discrete
        probability efficiently.

        :param prefixsum: (float) upperbound on the sum of array prefix, in [0, sum()]
        :return: (int) the index satisfying the prefixsum constraint
        """
        if not 0 <= prefixsum <= self.sum():
            raise ValueError("prefixsum {} outside of [0, {}]".format(prefixsum, self.sum()))
        low, high = 0, self._size - 1
        while low < high:
            mid = (low + high) >> 1
            if self.sum(0, mid) > prefixsum:
                high = mid
            else:
                low = mid + 1
        return low


class MinSegmentTree(EfficientSegmentTree):
    def __init__(self, values):
        super(MinSegmentTree, self).__init__(values, min)

    def min(self, start=0, end=None):
        """Returns min(arr[start], ...,  arr[end])"""

        return super(MinSegmentTree, self).fold(float('inf'), start, end)


_KINDS = {
    'efficient': EfficientSegmentTree,
    'naive': NaiveSegmentTree,
}


def make_segment_tree(values, combine, kind='efficient'):
    """
    Build a segment tree of the requested kind

    :param values: (iterable) initial values
    :param combine: (lambda obj, obj -> obj) associative operation for combining elements
    :param kind: (str) 'efficient' or 'naive'
    :return: (SegmentTree) the tree
    """
    if kind not in _KINDS:
        raise ValueError('Unknown segment tree kind specified: %s' % (kind,))
    return _KINDS[kind](values, combine)
