"""Tests marked `expensive` cross-check trees of about a thousand positions over
tens of thousands of random operations. They are skipped unless pytest runs with --expensive."""

import pytest


def pytest_addoption(parser):
    parser.addoption("--expensive", action="store_true",
                     help="run expensive tests (which are otherwise skipped).")


def pytest_configure(config):
    config.addinivalue_line("markers", "expensive: slow randomized tests, run with --expensive")


def pytest_collection_modifyitems(config, items):
    flags = {'expensive': '--expensive'}
    skips = {keyword: pytest.mark.skip(reason="need {} option to run".format(flag))
             for keyword, flag in flags.items() if not config.getoption(flag)}
    for item in items:
        for keyword, skip in skips.items():
            if keyword in item.keywords:
                item.add_marker(skip)
