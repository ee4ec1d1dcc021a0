from pathlib import Path

from bomsync.core.config import BomSyncConfig
from bomsync.core.config import DEFAULT_PATTERNS
from bomsync.core.config import InspectionConfig
from bomsync.core.config import RepositoryManagerConfig


def test_inspection_config_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv('BOMSYNC_REPOS', 'npm-local, libs-release ,')
    monkeypatch.setenv('BOMSYNC_WORKERS', '8')
    monkeypatch.setenv('BOMSYNC_MANIFEST_DIR', str(tmp_path))
    monkeypatch.setenv('BOMSYNC_PROJECT_VERSION_NAME', 'prod')
    monkeypatch.setenv('BOMSYNC_PATTERNS_NPM', '*.tgz,*.tar.gz')

    config = InspectionConfig()

    assert config.repos == ['npm-local', 'libs-release']
    assert config.workers == 8
    assert config.manifest_dir == Path(tmp_path)
    assert config.project_version_name == 'prod'
    assert config.patterns['npm'] == '*.tgz,*.tar.gz'
    assert config.patterns['maven'] == DEFAULT_PATTERNS['maven']


def test_inspection_config_defaults(monkeypatch):
    monkeypatch.delenv('BOMSYNC_REPOS', raising=False)
    monkeypatch.delenv('BOMSYNC_INSPECTION_ENABLED', raising=False)
    config = InspectionConfig()
    assert config.repos == []
    assert config.enabled is True
    assert config.project_version_name


def test_repository_manager_repr_masks_token():
    config = RepositoryManagerConfig(url='http://a', api_token='hunter2')
    assert 'hunter2' not in repr(config)


def test_http_cache_path(monkeypatch, tmp_path):
    monkeypatch.setenv('BOMSYNC_CACHE_DIR', str(tmp_path))
    config = BomSyncConfig.load()
    assert config.paths.http_cache_path == tmp_path / 'requests-cache' / 'db.sqlite3'
