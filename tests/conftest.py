import pytest
import sys
import os
import logging
from typing import List

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from cdm import SourceFile
from sinks import DataTagCollector, UserLog

# ==============================================================================
# PYTEST CONFIGURATION & HOOKS
# ==============================================================================

def pytest_configure(config):
    """Configure pytest settings and markers."""
    config.addinivalue_line("markers", "unit: Pure unit tests with no external dependencies.")
    config.addinivalue_line("markers", "integration: Tests that exercise the full batch flow or the filesystem.")

@pytest.fixture(scope="session", autouse=True)
def setup_test_environment(pytestconfig):
    """Set up test environment with logging configuration."""
    # Use pytest's log_cli_level if available, otherwise default to INFO
    log_level = pytestconfig.getoption("log_cli_level") or "INFO"
    logging.basicConfig(
        level=log_level.upper(),
        format="[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] - %(message)s",
        stream=sys.stdout,
        force=True,
    )
    logging.info(f"Test logging configured with level: {log_level.upper()}")
    yield

# ==============================================================================
# TEST DATA UTILITIES
# ==============================================================================

def _build_isa(element_sep: str = "*", component_sep: str = ">", icn: str = "000000001") -> str:
    """A 105 character ISA segment (without terminator) with correctly padded fields."""
    fields = [
        "ISA", "00", " " * 10, "00", " " * 10,
        "ZZ", "SENDERID".ljust(15), "ZZ", "RECEIVERID".ljust(15),
        "240718", "1200", "U", "00401", icn, "0", "P", component_sep,
    ]
    return element_sep.join(fields)

def _build_997(
    body: List[str],
    terminator: str = "~",
    line_break: str = "\n",
    element_sep: str = "*",
    st_id: str = "997",
    gs06: str = "1001",
) -> str:
    """
    Wraps AK segments (written with '*') in an ISA/GS/ST envelope.
    The segment terminator is followed by line_break, which may be empty.
    """
    inner = [
        f"GS*FA*RECEIVERID*SENDERID*20240718*1200*{gs06}*X*004010",
        f"ST*{st_id}*0001",
        *body,
        f"SE*{len(body) + 2}*0001",
        f"GE*1*{gs06}",
        "IEA*1*000000001",
    ]
    segments = [_build_isa(element_sep)] + [seg.replace("*", element_sep) for seg in inner]
    separator = terminator + line_break
    return separator.join(segments) + separator

# ==============================================================================
# UNIT TEST FIXTURES
# ==============================================================================

@pytest.fixture
def build_isa():
    return _build_isa

@pytest.fixture
def build_997():
    return _build_997

@pytest.fixture
def accepted_body() -> List[str]:
    return ["AK1*IN*1234", "AK2*810*0001", "AK5*A", "AK9*A*1*1*1"]

@pytest.fixture
def rejected_body() -> List[str]:
    return [
        "AK1*IN*1234",
        "AK2*810*0001",
        "AK3*NX1*5*N1*1",
        "AK4*2*98*1",
        "AK5*R*5",
        "AK9*R*1*1*0",
    ]

@pytest.fixture
def accepted_997(accepted_body) -> str:
    return _build_997(accepted_body)

@pytest.fixture
def rejected_997(rejected_body) -> str:
    return _build_997(rejected_body)

@pytest.fixture
def accepted_file(accepted_997) -> SourceFile:
    return SourceFile(body=accepted_997, file_name="accepted_997.edi")

@pytest.fixture
def rejected_file(rejected_997) -> SourceFile:
    return SourceFile(body=rejected_997, file_name="rejected_997.edi")

@pytest.fixture
def user_log() -> UserLog:
    return UserLog()

@pytest.fixture
def tag_collector() -> DataTagCollector:
    return DataTagCollector()
