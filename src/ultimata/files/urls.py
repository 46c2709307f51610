"""File URL patterns."""

from django.urls import path

from . import views

urlpatterns = [
    path("products/<int:product_id>/download/", views.ProductDownloadView.as_view(), name="product-download"),
]

admin_urlpatterns = [
    path("upload-file/", views.AdminUploadFileView.as_view(), name="admin-upload-file"),
]
