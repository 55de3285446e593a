"""
Shared fixtures for the kandinsky test suite.

Sessions run on a small canvas with short step budgets and a thin
watercolour backdrop so frame-level tests stay quick.
"""

import random

import pytest

from kandinsky.config import CompositionConfig
from kandinsky.dispatch import Dispatcher
from kandinsky.session import SessionState
from kandinsky.surface import Surface

WIDTH = 200
HEIGHT = 150


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def config():
    """Small, fast variant of the stock configuration."""
    return CompositionConfig(
        n_anchors=30,
        splotch_layers=4,
        line_steps=20,
        arc_steps=12,
        bezier_steps=10,
        spiral_steps=8,
        lattice_delay=2,
    )


@pytest.fixture
def rng():
    return random.Random(1234)


# ---------------------------------------------------------------------------
# Session & dispatch
# ---------------------------------------------------------------------------

@pytest.fixture
def session(config, rng):
    return SessionState(WIDTH, HEIGHT, rng, config)


@pytest.fixture
def dispatcher(session):
    return Dispatcher(session)


@pytest.fixture
def drag(dispatcher):
    """Drag onto an anchor from its left, one second after the previous drag."""
    clock = {'t': 0}

    def _drag(anchor):
        clock['t'] += 1000
        return dispatcher.handle_drag(anchor.x, anchor.y, anchor.x - 5, anchor.y, t=clock['t'])

    return _drag


@pytest.fixture
def surface():
    return Surface(WIDTH, HEIGHT)
