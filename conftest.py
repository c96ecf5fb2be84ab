"""
Root pytest configuration for the shared kernel.

Sets up the Python path and test environment variables for all test directories.
"""

import os
import sys
from pathlib import Path

# Keep developer .env values and exported settings out of the tests
for name in list(os.environ):
    if name.startswith("SHARED_KERNEL_"):
        del os.environ[name]

# Project root
project_root = Path(__file__).parent

# Add src directory to path for imports (shared_kernel)
src_path = project_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))
