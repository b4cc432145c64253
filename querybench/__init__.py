"""
querybench: compare strategies for loading products with their images,
reviews, category, brand and counts from a relational store.
"""

__version__ = "1.0.0"
