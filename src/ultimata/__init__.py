"""Ultimata Shop: digital-goods storefront API."""
