#!/usr/bin/env python3
"""
Study planner - main entry point (`python .` from a checkout).
"""

import sys
from pathlib import Path

# Ensure package is in path
sys.path.insert(0, str(Path(__file__).parent))

from cli.main import main

if __name__ == "__main__":
    sys.exit(main())
