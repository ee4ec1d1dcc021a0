from unittest.mock import MagicMock

import pytest

from bomsync.core.repository import InMemoryRepositoryManager
from bomsync.models.identity import ExternalIdentity
from bomsync.models.identity import NoIdentity
from bomsync.models.inspection import InspectionStatus
from bomsync.models.inspection import SyncProperty
from bomsync.services.identification_service import IdentificationService
from bomsync.services.identification_service import NO_IDENTIFIER_FOUND
from bomsync.services.status_service import InspectionStatusService


@pytest.fixture
def manager():
    manager = InMemoryRepositoryManager()
    manager.add_repository('npm-local', 'npm')
    manager.add_repository('libs-release', 'maven')
    return manager


@pytest.fixture
def status_service(manager):
    return InspectionStatusService(manager, manager, 'host-1')


@pytest.fixture
def identification(manager, status_service):
    return IdentificationService(manager, manager, status_service)


def test_resolve_npm_from_properties(manager, identification):
    location = manager.add_artifact(
        'npm-local', 'left-pad/-/left-pad-1.3.0.tgz',
        properties={'npm.name': 'left-pad', 'npm.version': '1.3.0'},
    )
    artifact = identification.resolve(location, 'npm')

    assert artifact.location == location
    assert isinstance(artifact.identity, ExternalIdentity)
    assert artifact.identity.origin_id == 'left-pad/1.3.0'


def test_resolve_maven_from_layout(manager, identification):
    location = manager.add_artifact('libs-release', 'org/slf4j/slf4j-api/2.0.9/slf4j-api-2.0.9.jar')
    artifact = identification.resolve(location, 'maven')

    assert artifact.has_identity
    assert artifact.identity.forge.name == 'maven'
    assert artifact.identity.origin_id == 'org.slf4j:slf4j-api:2.0.9'


def test_resolve_without_metadata_returns_no_identity(manager, identification):
    location = manager.add_artifact('npm-local', 'mystery.tgz')
    artifact = identification.resolve(location, 'npm')
    assert isinstance(artifact.identity, NoIdentity)


def test_resolve_unsupported_ecosystem(manager, identification):
    location = manager.add_artifact('npm-local', 'image.tgz')
    artifact = identification.resolve(location, 'docker')
    assert isinstance(artifact.identity, NoIdentity)
    assert 'docker' in artifact.identity.reason


def test_populate_metadata_without_identity(manager, identification, status_service):
    location = manager.add_artifact('npm-local', 'mystery.tgz')
    identification.populate_metadata(identification.resolve(location, 'npm'))

    properties = manager.get_properties(location)
    assert status_service.get_inspection_status(location) is InspectionStatus.FAILURE
    assert status_service.get_inspection_status_message(location) == NO_IDENTIFIER_FOUND
    assert str(SyncProperty.ORIGIN_ID) not in properties
    assert str(SyncProperty.FORGE) not in properties


def test_populate_metadata_with_identity_is_idempotent(manager, identification, status_service):
    location = manager.add_artifact(
        'npm-local', 'left-pad-1.3.0.tgz',
        properties={'npm.name': 'left-pad', 'npm.version': '1.3.0'},
    )
    artifact = identification.resolve(location, 'npm')

    identification.populate_metadata(artifact)
    first = manager.get_properties(location)
    identification.populate_metadata(artifact)
    second = manager.get_properties(location)

    for key in (SyncProperty.ORIGIN_ID, SyncProperty.FORGE, SyncProperty.INSPECTION_STATUS):
        assert first[str(key)] == second[str(key)]
    assert second[str(SyncProperty.ORIGIN_ID)] == 'left-pad/1.3.0'
    assert second[str(SyncProperty.FORGE)] == 'npmjs'
    assert status_service.get_inspection_status(location) is InspectionStatus.PENDING


def test_resolve_reads_repository_manager():
    search = MagicMock()
    search.get_layout_info.return_value.is_valid = False
    search.get_properties.return_value = {'pypi.name': 'requests', 'pypi.version': '2.31.0'}
    service = IdentificationService(search, MagicMock(), MagicMock())

    artifact = service.resolve(MagicMock(), 'pypi')

    assert artifact.identity.origin_id == 'requests/2.31.0'
    search.get_layout_info.assert_called_once()
    search.get_properties.assert_called_once()
