from slowapi import Limiter
from slowapi.util import get_remote_address

from traindb.core.environment import is_rate_limit_enabled

# Limits are declared per route with @limiter.limit(get_rate_limit),
# which re-reads RATE_LIMIT on every request
limiter = Limiter(
    key_func=get_remote_address,
    enabled=is_rate_limit_enabled(),
)
