"""Catalog: categories, products and product reviews."""
