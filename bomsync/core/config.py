"""Configuration management for bomsync."""
import os
import socket
import tempfile
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

DEFAULT_PATTERNS: dict[str, str] = {
    'maven': '*.jar',
    'gradle': '*.jar',
    'ivy': '*.jar',
    'sbt': '*.jar',
    'npm': '*.tgz',
    'pypi': '*.whl,*.tar.gz,*.zip,*.egg',
    'nuget': '*.nupkg',
    'gems': '*.gem',
    'composer': '*.zip',
    'conda': '*.tar.bz2,*.conda',
    'cran': '*.tar.gz',
    'go': '*.zip',
    'cocoapods': '*.tar.gz',
    'bower': '*.tar.gz',
}


def _split_env_list(name: str) -> list[str]:
    raw = os.getenv(name, '')
    return [item.strip() for item in raw.split(',') if item.strip()]


def _load_patterns() -> dict[str, str]:
    """Default patterns, overridden by BOMSYNC_PATTERNS_<ECOSYSTEM> variables."""
    patterns = dict(DEFAULT_PATTERNS)
    prefix = 'BOMSYNC_PATTERNS_'
    for key, value in os.environ.items():
        if key.startswith(prefix) and value.strip():
            patterns[key[len(prefix):].lower()] = value.strip()
    return patterns


@dataclass
class PathConfig:
    """Scratch and cache locations."""
    cache_dir: Path = field(
        default_factory=lambda: Path(os.getenv('BOMSYNC_CACHE_DIR', '.cache')),
    )

    @property
    def http_cache_path(self) -> Path:
        return self.cache_dir / 'requests-cache' / 'db.sqlite3'


@dataclass
class BackendConfig:
    """SCA backend connection configuration."""
    url: str = field(
        default_factory=lambda: os.getenv('BOMSYNC_BACKEND_URL', 'https://localhost'),
    )
    api_token: str | None = field(
        default_factory=lambda: os.getenv('BOMSYNC_BACKEND_TOKEN'),
    )
    timeout: int = field(
        default_factory=lambda: int(os.getenv('BOMSYNC_BACKEND_TIMEOUT', '120')),
    )
    verify_ssl: bool = field(
        default_factory=lambda: os.getenv('BOMSYNC_BACKEND_VERIFY_SSL', 'true').lower() != 'false',
    )
    cache_ttl: int = 300

    def __repr__(self) -> str:
        return (
            f"BackendConfig(url={self.url!r}, api_token='*****', timeout={self.timeout!r}, "
            f"verify_ssl={self.verify_ssl!r}, cache_ttl={self.cache_ttl!r})"
        )


@dataclass
class RepositoryManagerConfig:
    """Repository manager (Artifactory REST API) connection configuration."""
    url: str = field(
        default_factory=lambda: os.getenv(
            'BOMSYNC_ARTIFACTORY_URL', 'http://localhost:8081/artifactory',
        ),
    )
    api_token: str | None = field(
        default_factory=lambda: os.getenv('BOMSYNC_ARTIFACTORY_TOKEN'),
    )
    timeout: int = 30

    def __repr__(self) -> str:
        return (
            f"RepositoryManagerConfig(url={self.url!r}, api_token='*****', "
            f"timeout={self.timeout!r})"
        )


@dataclass
class InspectionConfig:
    """Settings for artifact discovery and BOM synchronization."""
    repos: list[str] = field(
        default_factory=lambda: _split_env_list('BOMSYNC_REPOS'),
    )
    patterns: dict[str, str] = field(default_factory=_load_patterns)
    workers: int = field(
        default_factory=lambda: int(os.getenv('BOMSYNC_WORKERS', '5')),
    )
    repository_workers: int = field(
        default_factory=lambda: int(os.getenv('BOMSYNC_REPOSITORY_WORKERS', '2')),
    )
    manifest_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv('BOMSYNC_MANIFEST_DIR', tempfile.gettempdir()),
        ),
    )
    project_version_name: str = field(
        default_factory=lambda: os.getenv(
            'BOMSYNC_PROJECT_VERSION_NAME', socket.gethostname(),
        ),
    )
    enabled: bool = field(
        default_factory=lambda: os.getenv('BOMSYNC_INSPECTION_ENABLED', 'true').lower() != 'false',
    )


@dataclass
class BomSyncConfig:
    paths: PathConfig = field(default_factory=PathConfig)
    backend: BackendConfig = field(default_factory=BackendConfig)
    artifactory: RepositoryManagerConfig = field(default_factory=RepositoryManagerConfig)
    inspection: InspectionConfig = field(default_factory=InspectionConfig)

    @classmethod
    def load(cls) -> 'BomSyncConfig':
        return cls()


_config: BomSyncConfig | None = None


def get_config() -> BomSyncConfig:
    global _config
    if _config is None:
        _config = BomSyncConfig.load()
    return _config
