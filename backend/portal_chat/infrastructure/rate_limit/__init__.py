from portal_chat.infrastructure.rate_limit.send_rate_limiter import SendRateLimiter

__all__ = ["SendRateLimiter"]
