"""
URL configuration for admin API endpoints.
"""

from django.urls import path

from api.v1.admin import views

urlpatterns = [
    path(
        "licenses",
        views.LicenseCollectionView.as_view(),
        name="admin-licenses",
    ),
    path(
        "licenses/<uuid:license_id>/activate",
        views.ActivateLicenseView.as_view(),
        name="admin-activate-license",
    ),
    path(
        "licenses/<uuid:license_id>/deactivate",
        views.DeactivateLicenseView.as_view(),
        name="admin-deactivate-license",
    ),
]
