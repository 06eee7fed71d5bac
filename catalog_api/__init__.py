"""
Catalog REST API: products with color/size variants and color images.
"""
