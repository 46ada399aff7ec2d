import sys
from setuptools import setup, find_packages

if sys.version_info.major != 3:
    print('This Python is only compatible with Python 3, but you are running '
          'Python {}. The installation will likely fail.'.format(sys.version_info.major))


long_description = """
# segtree

Segment trees over any associative combining function: point updates and
inclusive range folds in logarithmic time, plus a naive reference
implementation used to cross-check it.

## Quick example

```python
import operator

from segtree import EfficientSegmentTree

tree = EfficientSegmentTree([1, 3, 5, 7], operator.add)
tree.fold(0, 0, 3)  # 16
tree.set(1, 10)
tree.fold(0, 1, 2)  # 15
```

The combining function only needs to be associative: folds keep the
positional order, so string concatenation or matrix products work too.

Cross-check both implementations on random operations:

```
python -m segtree.cross_check --combiner concat --size 100 --num-ops 10000
```
"""

setup(name='segtree',
      packages=[package for package in find_packages()
                if package.startswith('segtree')],
      install_requires=[
          'numpy',
      ],
      extras_require={
        'tests': [
            'pytest',
            'pytest-cov'
        ],
      },
      description='Segment trees with point updates and range folds over any associative operation.',
      keywords="segment-tree data-structures range-query python",
      license="MIT",
      long_description=long_description,
      long_description_content_type='text/markdown',
      version="0.1.0",
      )

# python setup.py sdist
# python setup.py bdist_wheel
