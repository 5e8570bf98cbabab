"""TreeOps pricing backend package.

This package provides the FastAPI backend for tree-service job pricing,
including:

- TreeScore scoring from tree geometry and site hazards
- Ordered business rules engine for fees, floors and risk flags
- Work order attachment of per-tree assessments with recomputed totals
- Invoice drafts built from attached assessments

Usage:
    # Development:
    uvicorn treeops.app:app --reload --port 8080

Modules:
    app: FastAPI application entry point
    scoring: TreeScore models, formulas and the assessment pipeline
    rules: Pricing business rules engine
    work_orders: Work order storage and invoice drafting
    routes: API routers
    schemas: Pydantic request/response models
"""

__version__ = "0.1.0"
