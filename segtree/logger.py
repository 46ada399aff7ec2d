"""
Console and file logging for segtree.

Free-form messages go through `log`/`debug`/`warn` and are filtered by the
current level. Run diagnostics are collected with `logkv`/`logkvs` (and
timed with `ProfileKV`), then written as one row by `dumpkvs` to every
configured output format.
"""
import os
import sys
import json
import time
import datetime
import tempfile
from collections import defaultdict

DEBUG = 10
INFO = 20
WARN = 30
ERROR = 40

DISABLED = 50


class KVWriter(object):
    def writekvs(self, kvs):
        """
        write one row of diagnostics

        :param kvs: (dict)
        """
        raise NotImplementedError

    def close(self):
        pass


class SeqWriter(object):
    def writeseq(self, seq):
        """
        write one message made of several parts

        :param seq: ([str])
        """
        raise NotImplementedError


class HumanOutputFormat(KVWriter, SeqWriter):
    """
    Aligned table of diagnostics and plain text messages

    :param filename_or_file: (str or File) path to open, or an already open text stream
    """

    def __init__(self, filename_or_file):
        self.own_file = isinstance(filename_or_file, str)
        self.file = open(filename_or_file, 'wt') if self.own_file else filename_or_file

    def writekvs(self, kvs):
        rows = [(self._truncate(str(key)), self._truncate(self._format(val))) for key, val in sorted(kvs.items())]
        if not rows:
            self.file.write('WARNING: tried to write empty key-value dict\n')
            self.file.flush()
            return
        keywidth = max(len(key) for key, _ in rows)
        valwidth = max(len(val) for _, val in rows)
        border = '-' * (keywidth + valwidth + 7)
        lines = [border]
        lines.extend('| {} | {} |'.format(key.ljust(keywidth), val.ljust(valwidth)) for key, val in rows)
        lines.append(border)
        self.file.write('\n'.join(lines) + '\n')
        self.file.flush()

    @staticmethod
    def _format(val):
        return '%-8.3g' % val if isinstance(val, float) else str(val)

    @staticmethod
    def _truncate(string):
        return string[:20] + '...' if len(string) > 23 else string

    def writeseq(self, seq):
        self.file.write(' '.join(seq) + '\n')
        self.file.flush()

    def close(self):
        if self.own_file:
            self.file.close()


class JSONOutputFormat(KVWriter):
    """
    One JSON object per row

    :param filename: (str) the file to write to
    """

    def __init__(self, filename):
        self.file = open(filename, 'wt')

    def writekvs(self, kvs):
        # numpy values are not JSON serializable
        row = {key: value.tolist() if hasattr(value, 'dtype') else value for key, value in kvs.items()}
        self.file.write(json.dumps(row, sort_keys=True) + '\n')
        self.file.flush()

    def close(self):
        self.file.close()


class CSVOutputFormat(KVWriter):
    """
    Comma separated rows, the header grows when a row brings new keys

    :param filename: (str) the file to write to
    """

    def __init__(self, filename):
        self.file = open(filename, 'w+t')
        self.keys = []
        self.sep = ','

    def writekvs(self, kvs):
        extra_keys = sorted(set(kvs) - set(self.keys))
        if extra_keys:
            self.keys.extend(extra_keys)
            self.file.seek(0)
            previous_rows = self.file.read().splitlines()[1:]
            self.file.seek(0)
            self.file.write(self.sep.join(self.keys) + '\n')
            for row in previous_rows:
                self.file.write(row + self.sep * len(extra_keys) + '\n')
        values = ['' if kvs.get(key) is None else str(kvs[key]) for key in self.keys]
        self.file.write(self.sep.join(values) + '\n')
        self.file.flush()

    def close(self):
        self.file.close()


def make_output_format(_format, ev_dir):
    """
    return a writer for the requested format

    :param _format: (str) 'stdout', 'log', 'json' or 'csv'
    :param ev_dir: (str) the logging directory
    :return: (KVWriter) the writer
    """
    os.makedirs(ev_dir, exist_ok=True)
    if _format == 'stdout':
        return HumanOutputFormat(sys.stdout)
    elif _format == 'log':
        return HumanOutputFormat(os.path.join(ev_dir, 'log.txt'))
    elif _format == 'json':
        return JSONOutputFormat(os.path.join(ev_dir, 'progress.json'))
    elif _format == 'csv':
        return CSVOutputFormat(os.path.join(ev_dir, 'progress.csv'))
    else:
        raise ValueError('Unknown format specified: %s' % (_format,))


# ================================================================
# API
# ================================================================

def logkv(key, val):
    """
    Record a diagnostic for the next `dumpkvs`, the last value wins

    :param key: (str) the diagnostic name
    :param val: (Any) its value
    """
    Logger.CURRENT.name2val[key] = val


def logkvs(key_values):
    """
    :param key_values: (dict) diagnostics to record
    """
    for key, value in key_values.items():
        logkv(key, value)


def dumpkvs():
    Logger.CURRENT.dumpkvs()


def log(*args, level=INFO):
    """
    Write the args, separated by spaces, to the outputs that accept messages,
    unless the current level is above `level`.

    :param args: (list) parts of the message
    :param level: (int) DEBUG=10, INFO=20, WARN=30, ERROR=40
    """
    Logger.CURRENT.log(*args, level=level)


def debug(*args):
    log(*args, level=DEBUG)


def warn(*args):
    log(*args, level=WARN)


class ProfileKV:
    """
    Adds the time spent in the block to the diagnostic "wait_<name>"

        with logger.ProfileKV("fold"):
            tree.fold(0, 0, 10)

    :param name: (str) the profiling name
    """

    def __init__(self, name):
        self.name = "wait_" + name

    def __enter__(self):
        self.start_time = time.time()

    def __exit__(self, _type, value, traceback):
        Logger.CURRENT.name2val[self.name] += time.time() - self.start_time


# ================================================================
# Backend
# ================================================================

class Logger(object):
    # stdout only, used until `configure` is called
    DEFAULT = None
    # the logger behind the free functions above
    CURRENT = None

    def __init__(self, folder, output_formats):
        """
        :param folder: (str) the logging directory, None when only logging to stdout
        :param output_formats: ([KVWriter]) where rows and messages go
        """
        self.name2val = defaultdict(float)
        self.level = INFO
        self.dir = folder
        self.output_formats = output_formats

    def dumpkvs(self):
        if self.level == DISABLED:
            return
        for fmt in self.output_formats:
            fmt.writekvs(self.name2val)
        self.name2val.clear()

    def log(self, *args, level=INFO):
        if self.level > level:
            return
        for fmt in self.output_formats:
            if isinstance(fmt, SeqWriter):
                fmt.writeseq([str(arg) for arg in args])

    def set_level(self, level):
        self.level = level

    def close(self):
        for fmt in self.output_formats:
            fmt.close()


Logger.DEFAULT = Logger.CURRENT = Logger(folder=None, output_formats=[HumanOutputFormat(sys.stdout)])


def configure(folder=None, format_strs=None):
    """
    Replace the current logger with one writing to `folder`

    :param folder: (str) the logging directory (if None, $SEGTREE_LOGDIR, if still None, tempdir/segtree-[date & time])
    :param format_strs: ([str]) output formats (if None, $SEGTREE_LOG_FORMAT, if still None, stdout, log and csv)
    """
    folder = folder or os.getenv('SEGTREE_LOGDIR') or os.path.join(
        tempfile.gettempdir(), datetime.datetime.now().strftime("segtree-%Y-%m-%d-%H-%M-%S-%f"))
    if format_strs is None:
        format_strs = os.getenv('SEGTREE_LOG_FORMAT', 'stdout,log,csv').split(',')
    output_formats = [make_output_format(f, folder) for f in format_strs if f]

    level = Logger.CURRENT.level
    Logger.CURRENT = Logger(folder=folder, output_formats=output_formats)
    Logger.CURRENT.set_level(level)
    log('Logging to %s' % folder)


class ScopedConfigure(object):
    """
    Configures the logger for the duration of a with block, then closes its
    files and puts the previous logger back, also when the block raises.

        with ScopedConfigure(format_strs=['csv']):
            ...

    :param folder: (str) the logging directory, see `configure`
    :param format_strs: ([str]) output formats, see `configure`
    """

    def __init__(self, folder=None, format_strs=None):
        self.dir = folder
        self.format_strs = format_strs
        self.prevlogger = None

    def __enter__(self):
        self.prevlogger = Logger.CURRENT
        configure(folder=self.dir, format_strs=self.format_strs)

    def __exit__(self, *args):
        Logger.CURRENT.close()
        Logger.CURRENT = self.prevlogger
