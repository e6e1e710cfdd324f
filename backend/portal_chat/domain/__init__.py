"""
DOMAIN LAYER - Messaging rules with no framework dependencies.
"""
