from datetime import timedelta
from pathlib import Path

import requests
import requests_cache
import structlog
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = structlog.get_logger('client')


def _log_response(response, *args, **kwargs):
    if getattr(response, '_logged', False):
        return
    response._logged = True

    is_cached = getattr(response, 'from_cache', False)
    logger.debug(
        'HTTP Request',
        method=response.request.method,
        url=response.url,
        status=response.status_code,
        elapsed=f"{response.elapsed.total_seconds():.3f}s",
        cached=is_cached,
        _style='dim' if is_cached else None,
    )


def get_http_client(
    cache_name: str | Path | None = None,
    expire_after: int = 300,
    retries: int = 3,
    pool_size: int = 20,
) -> requests.Session:
    """
    Returns a requests session with retry logic and pooled connections.

    When ``cache_name`` is given, GET lookups are cached in a sqlite
    database for ``expire_after`` seconds. Writes are never cached.
    """
    session: requests.Session
    if cache_name is not None:
        cache_path = Path(cache_name)
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        session = requests_cache.CachedSession(
            cache_name=str(cache_path),
            backend='sqlite',
            expire_after=timedelta(seconds=expire_after),
            allowable_codes=[200],
            allowable_methods=['GET'],
        )
    else:
        session = requests.Session()

    session.hooks['response'].append(_log_response)

    # Only retry on gateway-side errors; 4xx codes carry meaning for callers.
    retry_strategy = Retry(
        total=retries,
        backoff_factor=1,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=None,
        raise_on_status=False,
    )
    adapter = HTTPAdapter(
        pool_connections=pool_size,
        pool_maxsize=pool_size,
        max_retries=retry_strategy,
    )
    session.mount('https://', adapter)
    session.mount('http://', adapter)

    logger.debug(
        'Initialized HTTP Client',
        cache_name=str(cache_name) if cache_name else None,
        expire_after=expire_after,
    )
    return session
