"""Pytest configuration with shared fixtures for the recase tests."""

from __future__ import annotations

import logging
from typing import Callable, Generator

import pytest

from recase.core.CommandExecutor import CaseCommander
from recase.host.MemoryBuffer import MemoryBuffer, Selection


@pytest.fixture
def commander() -> CaseCommander:
    """A `CaseCommander` with the embedded default configuration."""
    return CaseCommander()


@pytest.fixture
def as_given_commander() -> CaseCommander:
    """A `CaseCommander` that processes regions exactly as the host gives them."""
    return CaseCommander({"regions": {"overlap_strategy": "as_given"}})


@pytest.fixture
def make_buffer() -> Callable[..., MemoryBuffer]:
    """Factory for in-memory buffers."""

    def _make(text: str = "", read_only: bool = False) -> MemoryBuffer:
        return MemoryBuffer(text, read_only=read_only)

    return _make


@pytest.fixture
def make_selection() -> Callable[..., Selection]:
    """Factory for selections built from ``(start, end)`` pairs."""

    def _make(*pairs: tuple[int, int]) -> Selection:
        return Selection(pairs)

    return _make


@pytest.fixture
def restore_root_logging() -> Generator[None, None, None]:
    """Restores root and region logger state changed by `setup_logging`."""
    root = logging.getLogger()
    region = logging.getLogger("recase.regions")
    saved = (
        list(root.handlers),
        root.level,
        list(region.handlers),
        region.disabled,
        region.propagate,
    )
    yield
    for handler in root.handlers:
        if handler not in saved[0]:
            handler.close()
    for handler in region.handlers:
        if handler not in saved[2]:
            handler.close()
    root.handlers = saved[0]
    root.setLevel(saved[1])
    region.handlers, region.disabled, region.propagate = saved[2], saved[3], saved[4]
