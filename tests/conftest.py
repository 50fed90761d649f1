from __future__ import annotations

import logging
from pathlib import Path

import pytest

from microgen.models import Interface
from tests._fixtures.interfaces import OutputBuilder, adder, string_service


@pytest.fixture
def output(tmp_path: Path) -> OutputBuilder:
    """Provide an output directory builder rooted at the pytest tmp_path."""
    return OutputBuilder(tmp_path)


@pytest.fixture
def adder_interface() -> Interface:
    return adder()


@pytest.fixture
def string_service_interface() -> Interface:
    return string_service(
        docs=(
            "// StringService operates on strings.",
            "// @microgen middleware, logging, recover, grpc",
            "// @protobuf github.com/acme/protobuf/stringpb",
        )
    )


@pytest.fixture(autouse=True)
def _reset_microgen_logging():
    """Drop handlers installed by ``configure_logging`` so they never outlive capsys."""
    yield
    logger = logging.getLogger("microgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
