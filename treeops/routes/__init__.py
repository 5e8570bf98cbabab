"""API route modules for the TreeOps backend.

This package contains focused routers that are registered with the main FastAPI app.
Each router handles a specific domain of functionality.

Routers:
- treescore: TreeScore calculation and quick estimates
- work_orders: Work orders, tree attachments and invoice drafts
- rules: Pricing rule catalog and hazard weights
- audit: Audit log listing
"""

from .audit import router as audit_router
from .rules import router as rules_router
from .treescore import router as treescore_router
from .work_orders import router as work_orders_router

__all__ = ["treescore_router", "work_orders_router", "rules_router", "audit_router"]
