# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the CMS business logic:
# - models/: Pydantic schemas for data validation
# - services/: Table, RPC and storage operations per content area
#
# Code in this package should NOT import from FastAPI routers.
# This keeps the logic testable and reusable.
# =============================================================================
