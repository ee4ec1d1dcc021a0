from abc import ABC
from abc import abstractmethod
from pathlib import Path
from typing import Any

import requests
import structlog
from ratelimit import limits
from ratelimit import sleep_and_retry

from bomsync.core.client import get_http_client
from bomsync.core.config import BackendConfig
from bomsync.core.errors import BackendError
from bomsync.models.backend import UNAUTHORIZED
from bomsync.models.backend import AddComponentResult
from bomsync.models.backend import BomComponent
from bomsync.models.backend import ComponentAdded
from bomsync.models.backend import ComponentMatchFailure
from bomsync.models.backend import HttpStatusFailure
from bomsync.models.identity import ExternalIdentity

logger = structlog.get_logger('backend_service')

# Keep well below the backend's default throttle of 100 requests/10s per token
API_CALLS = 80
API_PERIOD = 10

BDIO_CONTENT_TYPE = 'application/ld+json'


class BackendClient(ABC):
    """What the sync pipeline needs from the SCA backend."""

    @abstractmethod
    def add_component_to_project_version(
        self, identity: ExternalIdentity, project_name: str, project_version_name: str,
    ) -> AddComponentResult:
        ...

    @abstractmethod
    def import_manifest(self, code_location_name: str, manifest_file: Path) -> None:
        ...

    @abstractmethod
    def create_project_version(self, project_name: str, project_version_name: str) -> str:
        ...

    @abstractmethod
    def get_policy_rules(self, component: BomComponent) -> list[dict]:
        ...


class BackendService(BackendClient):
    """
    Black Duck-style REST client authenticated with an API token.

    Project, version and component lookups always go to the backend: a stale
    answer there would turn a healthy artifact into a permanent FAILURE. Only
    policy-rule lookups go through the cached session.
    """

    def __init__(self, config: BackendConfig, cache_name: str | Path | None = None):
        if not config.api_token:
            raise ValueError('Backend API token is required')
        self.config = config
        self.base_url = config.url.rstrip('/')
        self.session = get_http_client()
        self.policy_session = get_http_client(cache_name=cache_name, expire_after=config.cache_ttl)
        for session in (self.session, self.policy_session):
            session.verify = config.verify_ssl
            session.headers.update({
                'Accept': 'application/json',
                'User-Agent': 'bomsync',
            })
        self._authenticated = False

    def _authenticate(self):
        response = self.session.post(
            f"{self.base_url}/api/tokens/authenticate",
            headers={'Authorization': f"token {self.config.api_token}"},
            timeout=self.config.timeout,
        )
        response.raise_for_status()
        bearer = response.json().get('bearerToken')
        if not bearer:
            raise BackendError('Authentication response did not contain a bearer token', response.status_code)
        for session in (self.session, self.policy_session):
            session.headers['Authorization'] = f"Bearer {bearer}"
        self._authenticated = True
        logger.debug('Authenticated with backend', url=self.base_url)

    def _reset_authentication(self):
        for session in (self.session, self.policy_session):
            session.headers.pop('Authorization', None)
        self._authenticated = False

    @sleep_and_retry
    @limits(calls=API_CALLS, period=API_PERIOD)
    def _request(
        self, method: str, url: str, session: requests.Session | None = None, **kwargs,
    ) -> requests.Response:
        """
        Rate-limited request; raises requests.HTTPError on 4xx/5xx.

        A 401 on an authenticated session means the bearer token expired:
        authenticate again and retry once.
        """
        session = session or self.session
        if not url.startswith('http'):
            url = f"{self.base_url}{url}"
        kwargs.setdefault('timeout', self.config.timeout)

        was_authenticated = self._authenticated
        if not was_authenticated:
            self._authenticate()
        response = session.request(method, url, **kwargs)
        if response.status_code == UNAUTHORIZED and was_authenticated:
            logger.info('Bearer token rejected; authenticating again', url=url)
            self._reset_authentication()
            self._authenticate()
            response = session.request(method, url, **kwargs)
        response.raise_for_status()
        return response

    def _get_items(
        self, url: str, params: dict | None = None, session: requests.Session | None = None,
    ) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        offset = 0
        limit = 100
        while True:
            page_params = {**(params or {}), 'offset': offset, 'limit': limit}
            data = self._request('GET', url, session=session, params=page_params).json()
            page = data.get('items', [])
            items.extend(page)
            offset += len(page)
            if not page or offset >= data.get('totalCount', 0):
                return items

    @staticmethod
    def _link(item: dict[str, Any], rel: str) -> str | None:
        for link in item.get('_meta', {}).get('links', []):
            if link.get('rel') == rel:
                return link.get('href')
        return None

    def find_project(self, project_name: str) -> dict[str, Any] | None:
        projects = self._get_items('/api/projects', params={'q': f"name:{project_name}"})
        return next((p for p in projects if p.get('name') == project_name), None)

    def find_project_version_url(self, project_name: str, project_version_name: str) -> str | None:
        project = self.find_project(project_name)
        if project is None:
            return None
        versions_url = self._link(project, 'versions')
        if not versions_url:
            return None
        versions = self._get_items(versions_url, params={'q': f"versionName:{project_version_name}"})
        version = next((v for v in versions if v.get('versionName') == project_version_name), None)
        return version.get('_meta', {}).get('href') if version else None

    def find_component_version_url(self, identity: ExternalIdentity) -> str | None:
        query = f"{identity.forge.name}:{identity.origin_id}"
        for item in self._get_items('/api/components', params={'q': query}):
            url = item.get('version') or item.get('variant')
            if url:
                return url
        return None

    def add_component_to_project_version(
        self, identity: ExternalIdentity, project_name: str, project_version_name: str,
    ) -> AddComponentResult:
        try:
            version_url = self.find_project_version_url(project_name, project_version_name)
            if version_url is None:
                raise BackendError(f"Project version not found: {project_name} {project_version_name}")

            component_url = self.find_component_version_url(identity)
            if component_url is None:
                return ComponentMatchFailure(identity.origin_id, f"No component matches {identity}")

            self._request(
                'POST', f"{version_url}/components",
                json={'component': component_url},
            )
            return ComponentAdded(component_url)
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 0
            return HttpStatusFailure(status_code, str(e))

    def import_manifest(self, code_location_name: str, manifest_file: Path) -> None:
        with open(manifest_file, 'rb') as f:
            self._request(
                'POST', '/api/bom-import',
                data=f.read(),
                headers={'Content-Type': BDIO_CONTENT_TYPE},
            )
        logger.info('Uploaded manifest', code_location=code_location_name, file=str(manifest_file))

    def create_project_version(self, project_name: str, project_version_name: str) -> str:
        existing = self.find_project_version_url(project_name, project_version_name)
        if existing:
            return existing

        version_request = {
            'versionName': project_version_name,
            'phase': 'DEVELOPMENT',
            'distribution': 'EXTERNAL',
        }
        project = self.find_project(project_name)
        versions_url = self._link(project, 'versions') if project else None
        if versions_url:
            response = self._request('POST', versions_url, json=version_request)
            logger.info('Created project version', project=project_name, version=project_version_name)
            return response.headers.get('Location', '')

        response = self._request(
            'POST', '/api/projects',
            json={
                'name': project_name,
                'versionRequest': version_request,
            },
        )
        logger.info('Created project version', project=project_name, version=project_version_name)
        return response.headers.get('Location', '')

    def get_policy_rules(self, component: BomComponent) -> list[dict]:
        url = component.link('policy-rules')
        if not url:
            return []
        return self._get_items(url, session=self.policy_session)
