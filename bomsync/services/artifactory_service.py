from pathlib import Path
from urllib.parse import quote

import requests
import structlog

from bomsync.core.client import get_http_client
from bomsync.core.config import RepositoryManagerConfig
from bomsync.core.errors import RepositoryManagerError
from bomsync.core.repository import MAVEN_LAYOUT_TYPES
from bomsync.core.repository import PropertyStore
from bomsync.core.repository import RepositorySearch
from bomsync.models.layout import LayoutInfo
from bomsync.models.location import ArtifactLocation
from bomsync.models.package_type import PackageType

logger = structlog.get_logger('artifactory_service')

# Characters with special meaning in the properties matrix syntax
_PROPERTY_SPECIAL_CHARS = ',|=;'


def escape_property_value(value: str) -> str:
    """Backslash-escape matrix delimiters, then percent-encode for the query string."""
    escaped = ''.join(f"\\{c}" if c in _PROPERTY_SPECIAL_CHARS else c for c in value)
    return quote(escaped, safe='')


class ArtifactoryService(RepositorySearch, PropertyStore):
    """Repository manager adapter over the Artifactory REST API."""

    def __init__(self, config: RepositoryManagerConfig, cache_name: str | Path | None = None):
        self.config = config
        self.base_url = config.url.rstrip('/')
        self.session = get_http_client(cache_name=cache_name)
        self.session.headers.update({'User-Agent': 'bomsync'})
        if config.api_token:
            self.session.headers['Authorization'] = f"Bearer {config.api_token}"
        self._ecosystems: dict[str, str] = {}

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        kwargs.setdefault('timeout', self.config.timeout)
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            raise RepositoryManagerError(f"{method} {url} failed: {e}") from e
        return response

    def _storage_path(self, location: ArtifactLocation) -> str:
        path = f"/api/storage/{quote(location.repo_key)}"
        if location.path:
            path += f"/{quote(location.path)}"
        return path

    def find_by_name_pattern(self, pattern: str, repo_key: str) -> list[ArtifactLocation]:
        response = self._request(
            'GET', '/api/search/artifact',
            params={'name': pattern, 'repos': repo_key},
        )
        if not response.ok:
            raise RepositoryManagerError(
                f"Artifact search failed for {repo_key} ({response.status_code})",
            )
        locations = []
        marker = '/api/storage/'
        for result in response.json().get('results', []):
            uri = result.get('uri', '')
            if marker in uri:
                locations.append(ArtifactLocation.parse(uri.split(marker, 1)[1]))
        return locations

    def get_repository_ecosystem(self, repo_key: str) -> str:
        if repo_key not in self._ecosystems:
            response = self._request('GET', f"/api/repositories/{quote(repo_key)}")
            if not response.ok:
                raise RepositoryManagerError(
                    f"Repository {repo_key} not found ({response.status_code})",
                )
            self._ecosystems[repo_key] = (response.json().get('packageType') or '').lower()
        return self._ecosystems[repo_key]

    def get_layout_info(self, location: ArtifactLocation) -> LayoutInfo:
        ecosystem = self.get_repository_ecosystem(location.repo_key)
        if PackageType.from_ecosystem(ecosystem) in MAVEN_LAYOUT_TYPES:
            return LayoutInfo.from_maven_path(location.path)
        return LayoutInfo()

    def get_properties(self, location: ArtifactLocation) -> dict[str, str]:
        response = self._request('GET', f"{self._storage_path(location)}?properties")
        # Items without properties answer 404
        if response.status_code == 404:
            return {}
        if not response.ok:
            raise RepositoryManagerError(
                f"Reading properties of {location} failed ({response.status_code})",
            )
        properties = response.json().get('properties', {})
        return {key: values[0] if values else '' for key, values in properties.items()}

    def get_artifact_count(self, repo_key: str) -> int:
        response = self._request('GET', '/api/storageinfo')
        if not response.ok:
            raise RepositoryManagerError(f"Storage info unavailable ({response.status_code})")
        for summary in response.json().get('repositoriesSummaryList', []):
            if summary.get('repoKey') == repo_key:
                return int(summary.get('filesCount', 0))
        return 0

    def set_property(self, location: ArtifactLocation, key: str, value: str) -> None:
        query = f"properties={quote(key, safe='')}={escape_property_value(value)}&recursive=0"
        response = self._request('PUT', f"{self._storage_path(location)}?{query}")
        if not response.ok:
            raise RepositoryManagerError(
                f"Setting {key} on {location} failed ({response.status_code})",
            )

    def delete_property(self, location: ArtifactLocation, key: str) -> None:
        query = f"properties={quote(key, safe='')}&recursive=0"
        response = self._request('DELETE', f"{self._storage_path(location)}?{query}")
        if not response.ok and response.status_code != 404:
            raise RepositoryManagerError(
                f"Deleting {key} on {location} failed ({response.status_code})",
            )
