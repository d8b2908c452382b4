"""
Utility modules: logging, settings and path helpers
"""
