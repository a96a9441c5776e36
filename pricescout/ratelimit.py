from slowapi import Limiter
from slowapi.util import get_remote_address

from pricescout.deps import get_settings

limiter = Limiter(key_func=get_remote_address)
RECEIPT_RATE_LIMIT = get_settings().rate_limit
