# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Exhibition CMS API:
# - test_slugs.py, test_dates.py, test_uploads.py, test_notifications.py,
#   test_db_errors.py: lib/ helpers
# - test_models.py: Pydantic model validation
# - test_*_service.py: Services against the in-memory Supabase fake
# - test_routers.py: Endpoints through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
