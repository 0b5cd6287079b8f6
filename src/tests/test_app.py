"""The application module must import cleanly on its own."""

import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]


@pytest.mark.parametrize("module", ["src.main", "src.rsvps.repository.store", "src.models"])
def test_module_imports_in_fresh_interpreter(module):
    # A fresh interpreter, so nothing conftest already imported can hide a cycle
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=ROOT,
        capture_output=True,
        text=True,
    )

    assert result.returncode == 0, result.stderr


def test_app_registers_both_tables():
    from src.main import app  # noqa: F401
    from src.models import BaseModel

    assert {"rsvps", "notification_logs"} <= set(BaseModel.metadata.tables)
