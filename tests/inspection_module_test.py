from unittest.mock import MagicMock

import pytest

from bomsync.core.config import BomSyncConfig
from bomsync.core.config import InspectionConfig
from bomsync.core.container import Container
from bomsync.core.repository import InMemoryRepositoryManager
from bomsync.models.inspection import InspectionStatus
from bomsync.models.location import ArtifactLocation
from bomsync.services.inspection_module import InspectionModuleConfig
from bomsync.services.inspection_module import PACKAGE_TYPE_NOT_SUPPORTED


@pytest.fixture
def manager():
    manager = InMemoryRepositoryManager()
    manager.add_repository('npm-local', 'npm')
    manager.add_repository('docker-local', 'docker')
    return manager


@pytest.fixture
def backend():
    return MagicMock()


@pytest.fixture
def container(manager, backend, tmp_path):
    config = BomSyncConfig(
        inspection=InspectionConfig(
            repos=['npm-local', 'docker-local'],
            patterns={'npm': '*.tgz'},
            workers=1,
            repository_workers=2,
            manifest_dir=tmp_path,
            project_version_name='v1',
            enabled=True,
        ),
    )
    return Container(config=config, repository_manager=manager, backend=backend)


@pytest.fixture
def module(container):
    return container.create_inspection_module()


@pytest.fixture
def status_service(container):
    return container.get_status_service()


def test_config_validation():
    assert InspectionModuleConfig(repos=['a']).validate() == []
    errors = InspectionModuleConfig(repos=[], workers=0).validate()
    assert len(errors) == 2


def test_registry_accepts_valid_module(container, module):
    registry = container.get_module_registry()
    registry.register_modules(module)
    assert registry.get_first_module_config_by_name('inspectionmodule') is module.module_config


def test_unsupported_repository_fails_initialization(module, status_service):
    module.initialize_repository('docker-local')

    root = ArtifactLocation.root('docker-local')
    assert status_service.get_inspection_status(root) is InspectionStatus.FAILURE
    assert status_service.get_inspection_status_message(root) == PACKAGE_TYPE_NOT_SUPPORTED


def test_empty_supported_repository_is_initialized(module, backend, status_service):
    module.initialize_repository('npm-local')

    backend.create_project_version.assert_called_once_with('npm-local', 'v1')
    assert status_service.get_inspection_status(ArtifactLocation.root('npm-local')) is InspectionStatus.SUCCESS


def test_populated_repository_runs_full_sync(module, manager, backend, status_service):
    manager.add_artifact('npm-local', 'a-1.0.tgz', properties={'npm.name': 'a', 'npm.version': '1.0'})

    module.initialize_repository('npm-local')

    backend.create_project_version.assert_not_called()
    backend.import_manifest.assert_called_once()
    assert status_service.get_inspection_status(ArtifactLocation.root('npm-local')) is InspectionStatus.PENDING


def test_initialized_repository_is_skipped(module, backend, status_service):
    status_service.set_inspection_status(ArtifactLocation.root('npm-local'), InspectionStatus.SUCCESS)

    module.initialize_repository('npm-local')

    assert backend.mock_calls == []


def test_initialization_error_is_recorded(module, backend, status_service):
    backend.create_project_version.side_effect = RuntimeError('backend down')

    module.initialize_repository('npm-local')

    root = ArtifactLocation.root('npm-local')
    assert status_service.get_inspection_status(root) is InspectionStatus.FAILURE
    assert status_service.get_inspection_status_message(root) == 'backend down'


def test_identify_artifacts_runs_every_repository(module, manager):
    manager.add_artifact('npm-local', 'a-1.0.tgz', properties={'npm.name': 'a', 'npm.version': '1.0'})

    results = module.identify_artifacts()

    assert set(results) == {'npm-local', 'docker-local'}
    assert results['npm-local'].mode == 'full'
    assert results['docker-local'].total == 0


def test_disabled_module_does_nothing(module, backend):
    module.module_config.enabled = False

    assert module.identify_artifacts() == {}
    module.initialize_repositories()
    assert backend.mock_calls == []
