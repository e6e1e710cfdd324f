"""
RateLimitExceededError - Raised when a sender exceeds the send quota.
Maps to: HTTP 429 Too Many Requests
"""


class RateLimitExceededError(Exception):
    def __init__(self, message: str = "Rate limit exceeded. Please slow down."):
        super().__init__(message)
