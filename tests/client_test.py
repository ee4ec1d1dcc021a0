import requests_cache

from bomsync.core.client import get_http_client


def test_get_http_client_returns_session():
    """Test get_http_client returns a requests Session."""
    session = get_http_client()
    assert hasattr(session, 'get')
    assert hasattr(session, 'post')
    assert callable(session.get)


def test_get_http_client_has_adapters():
    """Test session has http and https adapters mounted."""
    session = get_http_client()
    assert 'https://' in session.adapters
    assert 'http://' in session.adapters


def test_get_http_client_retry_on_server_errors():
    """Test retry adapter is configured for gateway errors only."""
    session = get_http_client(retries=3)
    adapter = session.get_adapter('https://example.com')
    assert adapter.max_retries.total == 3
    assert 412 not in adapter.max_retries.status_forcelist
    assert 503 in adapter.max_retries.status_forcelist


def test_get_http_client_with_cache(tmp_path):
    """Test a cache path yields a cached session and creates its directory."""
    cache_path = tmp_path / 'cache' / 'db.sqlite3'
    session = get_http_client(cache_name=cache_path, expire_after=60)
    assert isinstance(session, requests_cache.CachedSession)
    assert cache_path.parent.is_dir()


def test_get_http_client_logs_responses():
    session = get_http_client()
    assert len(session.hooks['response']) == 1
