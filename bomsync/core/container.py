"""Dependency Injection Container."""
from bomsync.core.config import BomSyncConfig
from bomsync.core.config import get_config
from bomsync.core.repository import PropertyStore
from bomsync.core.repository import RepositorySearch
from bomsync.services.artifactory_service import ArtifactoryService
from bomsync.services.backend_service import BackendClient
from bomsync.services.backend_service import BackendService
from bomsync.services.identification_service import IdentificationService
from bomsync.services.inspection_module import InspectionModule
from bomsync.services.inspection_module import InspectionModuleConfig
from bomsync.services.locator_service import ArtifactLocatorService
from bomsync.services.manifest_service import ManifestService
from bomsync.services.module_registry import ModuleRegistry
from bomsync.services.pattern_service import PackageTypePatternService
from bomsync.services.status_service import InspectionStatusService
from bomsync.services.sync_service import SyncService


class Container:
    """
    Wires services together. Hosts pass their own repository manager and
    backend client; otherwise the REST adapters are built from configuration.
    """

    def __init__(
        self,
        config: BomSyncConfig | None = None,
        repository_manager: RepositorySearch | None = None,
        property_store: PropertyStore | None = None,
        backend: BackendClient | None = None,
    ) -> None:
        self.config: BomSyncConfig = config or get_config()
        self._repository_manager = repository_manager
        self._property_store = property_store
        self._backend = backend
        self._status_service: InspectionStatusService | None = None
        self._sync_service: SyncService | None = None
        self._module_registry: ModuleRegistry | None = None
        self._manifest_service: ManifestService | None = None

    # -- Adapters --

    def get_repository_manager(self) -> RepositorySearch:
        if self._repository_manager is None:
            self._repository_manager = ArtifactoryService(self.config.artifactory)
        return self._repository_manager

    def get_property_store(self) -> PropertyStore:
        if self._property_store is None:
            manager = self.get_repository_manager()
            if not isinstance(manager, PropertyStore):
                raise ValueError('A property store is required for this repository manager')
            self._property_store = manager
        return self._property_store

    def get_backend(self) -> BackendClient:
        if self._backend is None:
            self._backend = BackendService(
                self.config.backend,
                cache_name=self.config.paths.http_cache_path,
            )
        return self._backend

    # -- Services --

    def get_pattern_service(self) -> PackageTypePatternService:
        return PackageTypePatternService(self.config.inspection.patterns)

    def get_locator_service(self) -> ArtifactLocatorService:
        return ArtifactLocatorService(self.get_repository_manager(), self.get_pattern_service())

    def get_status_service(self) -> InspectionStatusService:
        if not self._status_service:
            self._status_service = InspectionStatusService(
                self.get_repository_manager(),
                self.get_property_store(),
                self.config.inspection.project_version_name,
            )
        return self._status_service

    def get_identification_service(self) -> IdentificationService:
        return IdentificationService(
            self.get_repository_manager(),
            self.get_property_store(),
            self.get_status_service(),
        )

    def get_manifest_service(self) -> ManifestService:
        # Shared so that every sync sees the same per-path manifest locks
        if not self._manifest_service:
            self._manifest_service = ManifestService(
                self.get_identification_service(),
                self.config.inspection.manifest_dir,
            )
        return self._manifest_service

    def get_sync_service(self) -> SyncService:
        if not self._sync_service:
            self._sync_service = SyncService(
                search=self.get_repository_manager(),
                locator=self.get_locator_service(),
                status_service=self.get_status_service(),
                identification=self.get_identification_service(),
                manifests=self.get_manifest_service(),
                backend=self.get_backend(),
                workers=self.config.inspection.workers,
            )
        return self._sync_service

    def create_inspection_module(self) -> InspectionModule:
        """Factory (not cached) so each module owns its configuration."""
        return InspectionModule(
            config=InspectionModuleConfig.from_config(self.config.inspection),
            search=self.get_repository_manager(),
            locator=self.get_locator_service(),
            status_service=self.get_status_service(),
            sync=self.get_sync_service(),
            backend=self.get_backend(),
        )

    def get_module_registry(self) -> ModuleRegistry:
        if not self._module_registry:
            self._module_registry = ModuleRegistry()
        return self._module_registry
