"""
Helpers for the command line entry points
"""
from segtree.misc_util import boolean_flag


def arg_parser():
    """
    Create an empty argparse.ArgumentParser.

    :return: (ArgumentParser)
    """
    import argparse
    return argparse.ArgumentParser(formatter_class=argparse.ArgumentDefaultsHelpFormatter)


def cross_check_arg_parser():
    """
    Create an argparse.ArgumentParser for cross_check.py.

    :return: (ArgumentParser) parser {'--combiner': 'sum', '--size': 100, '--num-ops': 1000, '--seed': 0,
        '--log-format': 'stdout', '--raise-on-mismatch': True}
    """
    from segtree.cross_check import PRESETS
    parser = arg_parser()
    parser.add_argument('--combiner', help='combining function', choices=sorted(PRESETS), default='sum')
    parser.add_argument('--size', help='number of positions in the trees', type=int, default=100)
    parser.add_argument('--num-ops', help='number of random operations', type=int, default=1000)
    parser.add_argument('--seed', help='RNG seed', type=int, default=0)
    parser.add_argument('--log-format', help='comma separated logger output formats', default='stdout')
    boolean_flag(parser, 'raise-on-mismatch', default=True, help_msg='fail on the first mismatch')
    return parser
