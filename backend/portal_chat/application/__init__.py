"""
APPLICATION LAYER - messaging use cases as command / query handlers.
"""
