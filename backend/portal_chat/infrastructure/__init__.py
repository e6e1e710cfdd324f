"""
Infrastructure Layer - adapters for the domain ports and process-wide state.
"""
