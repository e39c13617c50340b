from __future__ import annotations

import contextlib
import http.client
import time
from typing import Optional
from urllib.request import Request, urlopen

from . import cache as _cache

UA = "epubkit/0.1 (+https://pypi.org/project/epubkit/)"

# urllib raises OSError subclasses, http.client its own hierarchy (InvalidURL,
# IncompleteRead), and ValueError for URLs it cannot parse.
FETCH_ERRORS = (OSError, http.client.HTTPException, ValueError)


def fetch_bytes(
    url: str,
    *,
    retry: int = 3,
    sleep: float = 1.0,
    timeout: float = 20,
    use_cache: bool = False,
) -> bytes:
    """Fetch URL bytes with basic retries and optional cache."""
    last_err: Optional[Exception] = None
    if use_cache:
        data = _cache.load(url)
        if data is not None:
            return data
    for attempt in range(max(1, retry)):
        try:
            req = Request(url, headers={"User-Agent": UA})
            with contextlib.closing(urlopen(req, timeout=timeout)) as resp:
                data = resp.read()
            if use_cache:
                _cache.store(url, data)
            return data
        except FETCH_ERRORS as e:
            last_err = e
            if attempt + 1 < retry:
                time.sleep(sleep * (2 ** attempt))
    assert last_err is not None
    raise last_err
