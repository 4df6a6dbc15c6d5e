from slowapi import Limiter
from slowapi.util import get_remote_address
from devevent.core.config import settings

# Keyed by client address; disabled entirely with RATE_LIMIT_ENABLED=false
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
