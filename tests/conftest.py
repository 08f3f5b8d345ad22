"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
# This ensures that the local covmap package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of covmap modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("covmap"):
        del sys.modules[module_name]


@pytest.fixture(autouse=True)
def _reset_log_context() -> None:
    """Each test starts without a bound source file."""
    from covmap.core.logging import clear_source_file

    clear_source_file()
    structlog.contextvars.clear_contextvars()
