"""Store module for shopper-side state.

Per-user shopping cart and wishlist over catalog products. Checkout
itself lives in ``ultimata.orders``.
"""
