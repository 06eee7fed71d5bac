"""
Services package.

- domain: product write reconciliation and queries
- media: staged uploads and the product image store
"""
