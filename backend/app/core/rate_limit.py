"""Shared slowapi rate limiter.

Rate limiting is disabled entirely in the test environment.
"""
import os

from slowapi import Limiter
from slowapi.util import get_remote_address

if os.getenv("ENVIRONMENT") == "test":
    limiter = Limiter(key_func=get_remote_address, enabled=False)
else:
    limiter = Limiter(key_func=get_remote_address)
