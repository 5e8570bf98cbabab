"""Shared configuration for the TreeOps backend.

This module centralizes environment variable access and default values
to prevent drift between modules.
"""

import os

# Database configuration
DB_PATH = os.getenv("DB_PATH", "./data/treeops.db")

# Seconds a writer waits on SQLite's write lock before giving up
DB_TIMEOUT = float(os.getenv("DB_TIMEOUT", "10"))

# Invoice drafts
INVOICE_TAX_RATE = float(os.getenv("INVOICE_TAX_RATE", "8.5"))

# Rate limit applied to the TreeScore calculation endpoints
CALCULATION_RATE_LIMIT = os.getenv("CALCULATION_RATE_LIMIT", "100/minute")

# Maximum rows returned by the audit log listing
AUDIT_MAX_ROWS = int(os.getenv("AUDIT_MAX_ROWS", "1000"))
