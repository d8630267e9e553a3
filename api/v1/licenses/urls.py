"""
URL configuration for license API endpoints.
"""

from django.urls import path

from api.v1.licenses import views

urlpatterns = [
    path(
        "verify",
        views.VerifyLicenseView.as_view(),
        name="verify-license",
    ),
    path(
        "deactivate",
        views.DeactivateMachineView.as_view(),
        name="deactivate-machine",
    ),
]
