"""
URL configuration for the ledger service.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/                       - Ledger endpoints
        contracts/                 - Caller's active contracts
        contracts/{id}/            - Contract detail
        jobs/unpaid/               - Caller's unpaid jobs
        jobs/{job_id}/pay/         - Pay a job (POST)
        balances/deposit/{user_id}/ - Deposit into own balance (POST)
        admin/best-profession/     - Best-earning profession report
        admin/best-clients/        - Best-paying clients report

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    path("", include("ledger.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Ledger Admin"
admin.site.site_title = "Ledger Admin Portal"
admin.site.index_title = "Profiles, contracts and jobs"
