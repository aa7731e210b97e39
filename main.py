#!/usr/bin/env python3
# /cosmosql/main.py
"""
cosmosql Main Entry Point
=========================

Launches the console from a source checkout without installing it:
puts `src/` on the import path, then hands over to `cosmosql.cli.start`.
"""

import os
import sys

# Ensure the 'cosmosql' package is importable for source runs.
project_src = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if project_src not in sys.path:
    sys.path.insert(0, project_src)

from cosmosql.cli import start  # noqa: E402


if __name__ == "__main__":
    start()
