"""HTTP middleware: request timeout and request ID.

Applied in main app; order matters (last added = outermost).
"""

from portal.middleware.request_id import RequestIDMiddleware
from portal.middleware.timeout import TimeoutMiddleware

__all__ = [
    "RequestIDMiddleware",
    "TimeoutMiddleware",
]
