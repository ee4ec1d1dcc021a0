import pytest

from bomsync.core.repository import InMemoryRepositoryManager
from bomsync.models.inspection import InspectionStatus
from bomsync.models.inspection import SyncProperty
from bomsync.models.location import ArtifactLocation
from bomsync.services.status_service import InspectionStatusService


@pytest.fixture
def manager():
    manager = InMemoryRepositoryManager()
    manager.add_repository('npm-local', 'npm')
    return manager


@pytest.fixture
def status_service(manager):
    return InspectionStatusService(manager, manager, 'host-1')


def test_status_absent_by_default(manager, status_service):
    location = manager.add_artifact('npm-local', 'a.tgz')
    assert status_service.get_inspection_status(location) is None
    assert status_service.get_inspection_status(ArtifactLocation.root('npm-local')) is None


def test_set_status_overwrites(manager, status_service):
    location = manager.add_artifact('npm-local', 'a.tgz')

    status_service.set_inspection_status(location, InspectionStatus.PENDING)
    status_service.set_inspection_status(location, InspectionStatus.FAILURE, 'Status code: 500')

    properties = manager.get_properties(location)
    assert properties[str(SyncProperty.INSPECTION_STATUS)] == 'FAILURE'
    assert status_service.get_inspection_status_message(location) == 'Status code: 500'
    assert str(SyncProperty.LAST_INSPECTION) in properties


def test_status_without_reason_clears_message(manager, status_service):
    location = manager.add_artifact('npm-local', 'a.tgz')

    status_service.set_inspection_status(location, InspectionStatus.FAILURE, 'Unauthorized (401)')
    status_service.set_inspection_status(location, InspectionStatus.SUCCESS)

    assert status_service.get_inspection_status(location) is InspectionStatus.SUCCESS
    assert status_service.get_inspection_status_message(location) is None


def test_unknown_status_reads_as_absent(manager, status_service):
    location = manager.add_artifact(
        'npm-local', 'a.tgz',
        properties={str(SyncProperty.INSPECTION_STATUS): 'BOGUS'},
    )
    assert status_service.get_inspection_status(location) is None


def test_has_inspection_status(manager, status_service):
    location = manager.add_artifact('npm-local', 'a.tgz')
    status_service.set_inspection_status(location, InspectionStatus.PENDING)
    assert status_service.has_inspection_status(location, InspectionStatus.PENDING)
    assert not status_service.has_inspection_status(location, InspectionStatus.SUCCESS)


def test_repo_project_names_default(status_service):
    assert status_service.get_repo_project_name('npm-local') == 'npm-local'
    assert status_service.get_repo_project_version_name('npm-local') == 'host-1'


def test_repo_project_names_from_root_properties(manager, status_service):
    root = ArtifactLocation.root('npm-local')
    manager.set_property(root, str(SyncProperty.PROJECT_NAME), 'frontend')
    manager.set_property(root, str(SyncProperty.PROJECT_VERSION_NAME), 'prod')

    assert status_service.get_repo_project_name('npm-local') == 'frontend'
    assert status_service.get_repo_project_version_name('npm-local') == 'prod'
