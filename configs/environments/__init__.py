"""
Environment-specific settings profiles.
"""
