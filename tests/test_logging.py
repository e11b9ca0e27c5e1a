"""Tests for logging utilities."""

import logging
from io import StringIO

import pytest

from qcondsim.circuit import QuantumCircuit
from qcondsim.core import SimulatorConfiguration
from qcondsim.logging import configure_logging, get_logger, set_log_level


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    configure_logging(level=logging.WARNING)


def test_get_logger_namespaces_names():
    assert get_logger("test_module").name == "qcondsim.test_module"
    assert get_logger("qcondsim.backend").name == "qcondsim.backend"
    assert get_logger().name == "qcondsim"


def test_get_logger_caching():
    assert get_logger("test_module") is get_logger("test_module")


def test_get_logger_different_modules():
    logger1 = get_logger("module1")
    logger2 = get_logger("module2")
    assert logger1 is not logger2


def test_logger_does_not_propagate():
    assert get_logger("test_module").propagate is False


def test_set_log_level():
    logger = get_logger("test_module")
    set_log_level(logging.INFO)
    assert logger.level == logging.INFO
    assert all(h.level == logging.INFO for h in logger.handlers)


def test_set_log_level_string():
    logger = get_logger("test_module")
    set_log_level("DEBUG")
    assert logger.level == logging.DEBUG
    set_log_level("ERROR")
    assert logger.level == logging.ERROR


def test_configure_logging_writes_to_stream():
    logger = get_logger("test_module")
    stream = StringIO()
    configure_logging(level=logging.DEBUG, stream=stream)
    logger.debug("Debug message")
    output = stream.getvalue()
    assert "Debug message" in output
    assert "[DEBUG] qcondsim.test_module" in output


def test_configure_logging_custom_format():
    logger = get_logger("test_module")
    stream = StringIO()
    configure_logging(level=logging.INFO, format_string="%(levelname)s|%(message)s", stream=stream)
    logger.info("hello")
    assert stream.getvalue() == "INFO|hello\n"


def test_replay_logs_progress():
    """Replays report the operation count at INFO."""
    stream = StringIO()
    configure_logging(level=logging.INFO, stream=stream)

    circuit = QuantumCircuit(2, config=SimulatorConfiguration(tie_break="0"))
    circuit.h(0).cx(0, 1)
    circuit.execute_deterministic()

    output = stream.getvalue()
    assert "replaying 2 operations on 2 qubits" in output
    assert "replay finished" in output
