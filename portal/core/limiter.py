"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

SIGN_IN_LIMIT = "10/minute"
UPLOAD_LIMIT = "30/minute"

limit_auth = limiter.limit(SIGN_IN_LIMIT)
limit_upload = limiter.limit(UPLOAD_LIMIT)
