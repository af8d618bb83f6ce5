"""YAML loader for quality test suites."""

import logging
from pathlib import Path

from grounding_engine.core.config import read_yaml
from grounding_engine.harness.models import TestCase, TestSuite

logger = logging.getLogger(__name__)


def load_test_suite(path: str | Path) -> TestSuite:
    """Load a YAML test suite from disk and return a validated model."""
    suite = TestSuite.model_validate(read_yaml(path))
    malformed = sum(1 for t in suite.tests if not isinstance(t, TestCase))
    if malformed:
        logger.warning(
            "Suite '%s': %d test definitions do not validate and will be reported as failures",
            suite.name, malformed,
        )
    return suite
