"""Order and refund URL patterns."""

from django.urls import path

from . import views

urlpatterns = [
    path("orders/", views.OrderListView.as_view(), name="orders"),
    path("orders/<int:order_id>/", views.OrderDetailView.as_view(), name="order-detail"),
    path("refunds/", views.RefundListView.as_view(), name="refunds"),
]

admin_urlpatterns = [
    path("orders/", views.AdminOrderListView.as_view(), name="admin-orders"),
    path("orders/<int:order_id>/", views.AdminOrderDetailView.as_view(), name="admin-order"),
    path("refunds/", views.AdminRefundListView.as_view(), name="admin-refunds"),
    path("refunds/<int:refund_id>/", views.AdminRefundDetailView.as_view(), name="admin-refund"),
    path("products/<int:product_id>/buyers/", views.AdminProductBuyersView.as_view(), name="admin-product-buyers"),
    path("stats/", views.AdminStatsView.as_view(), name="admin-stats"),
]
