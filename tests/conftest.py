"""Shared pytest fixtures and markers for all tests."""

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def always_cooperate():
    """Genome 00000: never defects."""
    from ipd_playground.algorithms import get_strategy_by_name
    return get_strategy_by_name("00000")


@pytest.fixture
def always_defect():
    """Genome 11111: always defects."""
    from ipd_playground.algorithms import get_strategy_by_name
    return get_strategy_by_name("11111")


@pytest.fixture
def tit_for_tat():
    """Genome 00011: cooperates first, then copies the opponent's last move."""
    from ipd_playground.algorithms import get_strategy_by_name
    return get_strategy_by_name("00011")


@pytest.fixture
def pavlov():
    """Genome 00110: win-stay, lose-shift."""
    from ipd_playground.algorithms import get_strategy_by_name
    return get_strategy_by_name("00110")
