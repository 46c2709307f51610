"""Cart and wishlist URL patterns."""

from django.urls import path

from . import views

urlpatterns = [
    path("cart/", views.CartView.as_view(), name="cart"),
    path("cart/<int:item_id>/", views.CartItemView.as_view(), name="cart-item"),
    path("wishlist/", views.WishlistView.as_view(), name="wishlist"),
    path("wishlist/<int:product_id>/", views.WishlistItemView.as_view(), name="wishlist-item"),
    path("wishlist/<int:product_id>/check/", views.WishlistCheckView.as_view(), name="wishlist-check"),
]
