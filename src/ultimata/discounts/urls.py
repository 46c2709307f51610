"""Discount URL patterns."""

from django.urls import path

from . import views

urlpatterns = [
    path("validate-discount/", views.ValidateDiscountView.as_view(), name="validate-discount"),
]

admin_urlpatterns = [
    path("discount-codes/", views.AdminDiscountListView.as_view(), name="admin-discount-codes"),
    path("discount-codes/<int:discount_id>/", views.AdminDiscountDetailView.as_view(), name="admin-discount-code"),
]
