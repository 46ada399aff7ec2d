from segtree.segment_tree import SegmentTree, EfficientSegmentTree, NaiveSegmentTree, SumSegmentTree, \
    MinSegmentTree, make_segment_tree

__version__ = "0.1.0"
