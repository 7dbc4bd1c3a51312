import logging
import os
import sys

import pytest

# Ensure the skyfs package is importable without installation
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from skyfs.logging_config import operation_id_var  # noqa: E402


# Keep audit events visible to caplog and start every test without an operation id
@pytest.fixture(autouse=True)
def _audit_logging():
    logger = logging.getLogger("skyfs.audit")
    previous = logger.level
    logger.setLevel(logging.DEBUG)
    token = operation_id_var.set("")
    yield
    operation_id_var.reset(token)
    logger.setLevel(previous)
