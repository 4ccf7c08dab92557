import pytest
from rich.console import Console

from plugopt import Binder


@pytest.fixture
def binder():
    return Binder()


@pytest.fixture
def console():
    return Console(width=70, force_terminal=True, highlight=False, color_system=None, legacy_windows=False)


@pytest.fixture
def parse(binder):
    """Parse ``tokens`` into a fresh instance of ``cls``; returns ``(obj, consumed)``."""

    def inner(cls, tokens, start=0):
        return binder.parse(cls, tokens, start)

    return inner
