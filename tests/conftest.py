"""Shared fixtures: a fresh in-memory chart and engine per test."""

import pytest

from chartvoice.chart.state import ChartState
from chartvoice.commands.executor import VoiceCommandEngine


@pytest.fixture
def chart():
    """Chart without grid snapping so placement arithmetic stays exact."""
    return ChartState(snap=False)


@pytest.fixture
def engine(chart):
    return VoiceCommandEngine(chart, history_limit=50, nudge_step=40, gap=50)
