import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from dataclasses import field

import structlog

from bomsync.core.config import InspectionConfig
from bomsync.core.repository import RepositorySearch
from bomsync.core.stats import SyncStats
from bomsync.models.inspection import InspectionStatus
from bomsync.models.location import ArtifactLocation
from bomsync.models.package_type import PackageType
from bomsync.services.backend_service import BackendClient
from bomsync.services.locator_service import ArtifactLocatorService
from bomsync.services.module_registry import Module
from bomsync.services.module_registry import ModuleConfig
from bomsync.services.status_service import InspectionStatusService
from bomsync.services.sync_service import SyncService

logger = structlog.get_logger('inspection_module')

PACKAGE_TYPE_NOT_SUPPORTED = 'Package type not supported'


@dataclass
class InspectionModuleConfig(ModuleConfig):
    module_name: str = 'InspectionModule'
    repos: list[str] = field(default_factory=list)
    workers: int = 5
    repository_workers: int = 2

    @classmethod
    def from_config(cls, config: InspectionConfig) -> 'InspectionModuleConfig':
        return cls(
            enabled=config.enabled,
            repos=list(config.repos),
            workers=config.workers,
            repository_workers=config.repository_workers,
        )

    def validate(self) -> list[str]:
        errors = []
        if not self.repos:
            errors.append('At least one repository must be configured')
        if self.workers < 1:
            errors.append('workers must be at least 1')
        if self.repository_workers < 1:
            errors.append('repository_workers must be at least 1')
        return errors


class InspectionModule(Module):
    """Runs artifact identification over every configured repository."""

    def __init__(
        self,
        config: InspectionModuleConfig,
        search: RepositorySearch,
        locator: ArtifactLocatorService,
        status_service: InspectionStatusService,
        sync: SyncService,
        backend: BackendClient,
    ):
        self._config = config
        self.search = search
        self.locator = locator
        self.status_service = status_service
        self.sync = sync
        self.backend = backend

    @property
    def module_config(self) -> InspectionModuleConfig:
        return self._config

    def identify_artifacts(self, cancel: threading.Event | None = None) -> dict[str, SyncStats]:
        if not self._config.enabled:
            logger.info('Module disabled; skipping identification', module=self._config.module_name)
            return {}

        with ThreadPoolExecutor(max_workers=self._config.repository_workers) as executor:
            futures = {
                repo_key: executor.submit(self.sync.identify_artifacts, repo_key, cancel)
                for repo_key in self._config.repos
            }
            return {repo_key: future.result() for repo_key, future in futures.items()}

    def initialize_repositories(self) -> None:
        if not self._config.enabled:
            logger.info('Module disabled; skipping initialization', module=self._config.module_name)
            return
        for repo_key in self._config.repos:
            self.initialize_repository(repo_key)

    def initialize_repository(self, repo_key: str) -> None:
        """
        Give a never-inspected repository its first status. Unsupported package
        types fail immediately; empty supported repositories get an empty
        project version; anything else goes through a full sync.
        """
        repo_location = ArtifactLocation.root(repo_key)
        if self.status_service.get_inspection_status(repo_location) is not None:
            return

        try:
            ecosystem = self.search.get_repository_ecosystem(repo_key)
            if PackageType.from_ecosystem(ecosystem) is None:
                logger.warning('Package type not supported', repo=repo_key, ecosystem=ecosystem)
                self.status_service.set_inspection_status(
                    repo_location, InspectionStatus.FAILURE, PACKAGE_TYPE_NOT_SUPPORTED,
                )
                return

            if self.locator.get_artifact_count([repo_key]) == 0:
                project_name = self.status_service.get_repo_project_name(repo_key)
                project_version_name = self.status_service.get_repo_project_version_name(repo_key)
                self.backend.create_project_version(project_name, project_version_name)
                self.status_service.set_inspection_status(repo_location, InspectionStatus.SUCCESS)
                logger.info('Initialized empty repository', repo=repo_key, project=project_name)
                return
        except Exception as e:
            logger.exception('Failed to initialize repository', repo=repo_key)
            self.status_service.set_inspection_status(repo_location, InspectionStatus.FAILURE, str(e))
            return

        self.sync.identify_artifacts(repo_key)
