"""Pytest configuration."""

import os
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Keep test runs off the global Prometheus registry
os.environ.setdefault("METRICS_ENABLED", "false")
