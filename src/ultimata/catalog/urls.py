"""Catalog URL patterns."""

from django.urls import path

from . import views

urlpatterns = [
    path("products/", views.ProductListView.as_view(), name="product-list"),
    path("products/<int:product_id>/", views.ProductDetailView.as_view(), name="product-detail"),
    path("products/<int:product_id>/reviews/", views.ProductReviewsView.as_view(), name="product-reviews"),
    path("categories/", views.CategoryListView.as_view(), name="category-list"),
]

admin_urlpatterns = [
    path("products/", views.AdminProductListView.as_view(), name="admin-products"),
    path("products/<int:product_id>/", views.AdminProductDetailView.as_view(), name="admin-product"),
    path(
        "products/<int:product_id>/adjust-stock/",
        views.AdminStockAdjustView.as_view(),
        name="admin-product-adjust-stock",
    ),
    path("categories/", views.AdminCategoryListView.as_view(), name="admin-categories"),
    path("categories/<int:category_id>/", views.AdminCategoryDetailView.as_view(), name="admin-category"),
    path("reviews/", views.AdminReviewListView.as_view(), name="admin-reviews"),
    path("reviews/<int:review_id>/", views.AdminReviewDetailView.as_view(), name="admin-review"),
]
