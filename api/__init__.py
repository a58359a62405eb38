"""
HTTP API for Prompt Gallery.
"""
