"""Pytest fixtures for gridroute tests."""

import pytest

from gridroute.problem import Problem

# Problem file matching the multi_problem fixture
MULTI_PROBLEM_TEXT = """8;8
0;0;7;7
0;7;7;0
3;1;3;6
"""


@pytest.fixture
def small_problem():
    """6x6 grid with a single vertical pin pair."""
    return Problem(dimensions=(6, 6), pin_pairs=(((1, 3), (5, 3)),))


@pytest.fixture
def multi_problem():
    """8x8 grid with three crossing pin pairs."""
    return Problem(
        dimensions=(8, 8),
        pin_pairs=(
            ((0, 0), (7, 7)),
            ((0, 7), (7, 0)),
            ((3, 1), (3, 6)),
        ),
    )


@pytest.fixture
def problem_file(tmp_path):
    """Write MULTI_PROBLEM_TEXT to disk and return its path."""
    path = tmp_path / "problem.txt"
    path.write_text(MULTI_PROBLEM_TEXT)
    return path


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run with no user config and a project root at tmp_path."""
    (tmp_path / ".git").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("gridroute.config.USER_CONFIG_PATH", tmp_path / "no-user-config.toml")
    return tmp_path
