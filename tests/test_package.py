"""Public package surface."""

from __future__ import annotations

import logging

import pytest

import courier

pytestmark = pytest.mark.unit


def test_public_names_are_importable() -> None:
    for name in courier.__all__:
        assert hasattr(courier, name), name


def test_library_logger_is_silent_by_default() -> None:
    handlers = logging.getLogger("courier").handlers

    assert any(isinstance(h, logging.NullHandler) for h in handlers)


def test_version_is_a_string() -> None:
    assert isinstance(courier.__version__, str)
