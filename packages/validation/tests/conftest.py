"""Pytest configuration for ruleknobs_validation tests."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

from ruleknobs_validation import ValidationSettings

# Make the sample model and validator modules importable by name
tests_path = Path(__file__).parent
if str(tests_path) not in sys.path:
    sys.path.insert(0, str(tests_path))

FIXED_NOW = datetime(2024, 6, 15, 12, 0, 0)


@pytest.fixture
def fixed_now():
    """The instant returned by the settings clock."""
    return FIXED_NOW


@pytest.fixture
def settings():
    """Validation settings with a frozen clock."""
    return ValidationSettings(clock=lambda: FIXED_NOW)
