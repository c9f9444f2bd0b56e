"""
Global configuration for the ledger mirror.

This module contains environment-specific settings that apply across all modules.
"""

import os

DEFAULT_DATA_DIR = os.environ.get(
    "LEDGER_MIRROR_DATA_DIR",
    os.path.join(os.path.expanduser("~"), ".ledger_mirror"),
)
"""Directory holding the cache and cursor databases when no path is given."""
