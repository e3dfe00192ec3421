"""
Tree value model and the canonical node schema.
"""
