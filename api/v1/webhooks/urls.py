"""
URL configuration for webhook endpoints.
"""

from django.urls import path

from api.v1.webhooks import views

urlpatterns = [
    path("gumroad", views.GumroadWebhookView.as_view(), name="gumroad-webhook"),
    path("appsumo", views.AppSumoWebhookView.as_view(), name="appsumo-webhook"),
    path("stripe", views.StripeWebhookView.as_view(), name="stripe-webhook"),
]
