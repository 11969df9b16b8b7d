from __future__ import annotations

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential, wait_random


def delivery_retry(attempts: int = 3):
    """Retry outbound HTTP notifications on timeouts and transport errors only."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(max(1, int(attempts))),
        wait=wait_exponential(multiplier=0.2, max=2.0) + wait_random(0, 0.2),
        retry=retry_if_exception_type((TimeoutError, httpx.TimeoutException, httpx.TransportError)),
    )
