import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import as_completed

import structlog

from bomsync.core.repository import RepositorySearch
from bomsync.core.stats import SyncStats
from bomsync.models.backend import ALREADY_IN_BOM
from bomsync.models.backend import UNAUTHORIZED
from bomsync.models.backend import AddComponentResult
from bomsync.models.backend import ComponentAdded
from bomsync.models.backend import ComponentMatchFailure
from bomsync.models.backend import HttpStatusFailure
from bomsync.models.identity import ExternalIdentity
from bomsync.models.identity import IdentifiedArtifact
from bomsync.models.inspection import InspectionStatus
from bomsync.models.location import ArtifactLocation
from bomsync.services.backend_service import BackendClient
from bomsync.services.identification_service import IdentificationService
from bomsync.services.locator_service import ArtifactLocatorService
from bomsync.services.manifest_service import ManifestService
from bomsync.services.status_service import InspectionStatusService

logger = structlog.get_logger('sync_service')


def classify_add_component_result(result: AddComponentResult) -> tuple[InspectionStatus, str | None]:
    """Map a backend add-component outcome to the artifact status and reason to record."""
    match result:
        case ComponentAdded():
            return InspectionStatus.SUCCESS, None
        case HttpStatusFailure(status_code=code) if code == ALREADY_IN_BOM:
            return InspectionStatus.SUCCESS, None
        case HttpStatusFailure(status_code=code) if code == UNAUTHORIZED:
            return InspectionStatus.FAILURE, f"Unauthorized ({code})"
        case ComponentMatchFailure():
            return InspectionStatus.FAILURE, 'Failed to find component match'
        case HttpStatusFailure(status_code=code):
            return InspectionStatus.FAILURE, f"Status code: {code}"
    raise TypeError(f"Unexpected add-component result: {result!r}")


def _log_add_component_result(result: AddComponentResult, path: str) -> None:
    match result:
        case HttpStatusFailure(status_code=code) if code == ALREADY_IN_BOM:
            logger.info('Component already in BOM', path=path)
        case HttpStatusFailure(status_code=code) if code == UNAUTHORIZED:
            logger.warning(
                'Backend rejected the request as unauthorized; check the configured API token',
                path=path, status=code,
            )
        case HttpStatusFailure(status_code=code, message=message):
            logger.warning('Backend rejected component', path=path, status=code)
            logger.debug('Backend response', path=path, message=message)
        case ComponentMatchFailure():
            logger.warning('Cannot find component match', path=path)


class SyncService:
    """
    Keeps a repository's artifacts in step with its project on the backend.

    A repository without an inspection status gets a full manifest; once the
    backend has confirmed that manifest (repository status SUCCESS), later runs
    only report artifacts whose own status is still PENDING.
    """

    def __init__(
        self,
        search: RepositorySearch,
        locator: ArtifactLocatorService,
        status_service: InspectionStatusService,
        identification: IdentificationService,
        manifests: ManifestService,
        backend: BackendClient,
        workers: int = 5,
    ):
        self.search = search
        self.locator = locator
        self.status_service = status_service
        self.identification = identification
        self.manifests = manifests
        self.backend = backend
        self.workers = max(1, workers)

    def identify_artifacts(self, repo_key: str, cancel: threading.Event | None = None) -> SyncStats:
        stats = SyncStats(repo_key=repo_key)
        repo_location = ArtifactLocation.root(repo_key)
        log = logger.bind(repo=repo_key)

        try:
            repository_status = self.status_service.get_inspection_status(repo_location)
            locations = self.locator.get_identifiable_artifacts(repo_key)
            stats.total = len(locations)

            if not locations:
                log.warning(
                    'No identifiable artifacts found; the repository uses an unsupported '
                    'package type or no patterns are configured for it',
                )
                return stats

            ecosystem = self.search.get_repository_ecosystem(repo_key)
            project_name = self.status_service.get_repo_project_name(repo_key)
            project_version_name = self.status_service.get_repo_project_version_name(repo_key)

            if repository_status is None:
                stats.mode = 'full'
                submitted = self._create_project_from_repo(
                    project_name, project_version_name, ecosystem, locations, stats, cancel,
                )
                if submitted:
                    self.status_service.set_inspection_status(repo_location, InspectionStatus.PENDING)
            elif repository_status is InspectionStatus.SUCCESS:
                stats.mode = 'delta'
                self._add_delta_to_project(
                    project_name, project_version_name, ecosystem, locations, stats, cancel,
                )
            else:
                log.debug('Repository not ready for synchronization', status=repository_status.value)
        except Exception:
            log.exception('Failed to identify artifacts in repository')
            self.status_service.set_inspection_status(repo_location, InspectionStatus.FAILURE)

        log.info('Repository sync finished', **stats.as_log_fields())
        return stats

    def _resolve_all(
        self,
        locations: set[ArtifactLocation],
        ecosystem: str,
        stats: SyncStats,
        cancel: threading.Event | None,
    ) -> list[IdentifiedArtifact] | None:
        """Resolve identities on the worker pool. Returns None when cancelled."""
        artifacts: list[IdentifiedArtifact] = []
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = {
                executor.submit(self.identification.resolve, location, ecosystem): location
                for location in locations
            }
            for future in as_completed(futures):
                if cancel is not None and cancel.is_set():
                    executor.shutdown(wait=True, cancel_futures=True)
                    stats.inc_skipped(len(locations) - len(artifacts))
                    return None
                artifact = future.result()
                if artifact.has_identity:
                    stats.inc_identified()
                else:
                    stats.inc_unidentified()
                artifacts.append(artifact)
        return artifacts

    def _create_project_from_repo(
        self,
        project_name: str,
        project_version_name: str,
        ecosystem: str,
        locations: set[ArtifactLocation],
        stats: SyncStats,
        cancel: threading.Event | None,
    ) -> bool:
        artifacts = self._resolve_all(locations, ecosystem, stats, cancel)
        if artifacts is None:
            logger.info('Full sync cancelled before submission', repo=stats.repo_key)
            return False

        manifest = self.manifests.build_manifest(
            project_name, project_version_name, ecosystem, artifacts,
        )
        path = self.manifests.manifest_path(manifest)
        with self.manifests.lock_for(path):
            self.manifests.write_manifest(manifest)
            self.backend.import_manifest(manifest.code_location_name, path)
        stats.inc_submitted(len(manifest.graph))
        return True

    def _add_delta_to_project(
        self,
        project_name: str,
        project_version_name: str,
        ecosystem: str,
        locations: set[ArtifactLocation],
        stats: SyncStats,
        cancel: threading.Event | None,
    ) -> None:
        def process(location: ArtifactLocation) -> None:
            if cancel is not None and cancel.is_set():
                stats.inc_skipped()
                return
            if not self.status_service.has_inspection_status(location, InspectionStatus.PENDING):
                stats.inc_skipped()
                return
            artifact = self.identification.resolve(location, ecosystem)
            if artifact.has_identity:
                stats.inc_identified()
            else:
                stats.inc_unidentified()
            self.identification.populate_metadata(artifact)
            self.add_identified_artifact_to_project_version(
                artifact, project_name, project_version_name, stats,
            )

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            for future in as_completed([executor.submit(process, loc) for loc in locations]):
                future.result()

    def add_identified_artifact_to_project_version(
        self,
        artifact: IdentifiedArtifact,
        project_name: str,
        project_version_name: str,
        stats: SyncStats | None = None,
    ) -> InspectionStatus | None:
        """
        Report one identified artifact to an existing project version and record
        the outcome. Artifacts without an identity are left untouched.
        """
        if not isinstance(artifact.identity, ExternalIdentity):
            return None

        location = artifact.location
        path = str(location)
        try:
            result = self.backend.add_component_to_project_version(
                artifact.identity, project_name, project_version_name,
            )
            if stats is not None:
                stats.inc_submitted()
            _log_add_component_result(result, path)
            status, reason = classify_add_component_result(result)
        except Exception:
            logger.warning('Could not inspect artifact', path=path)
            logger.debug('Add component failed', path=path, exc_info=True)
            status, reason = InspectionStatus.FAILURE, None

        self.status_service.set_inspection_status(location, status, reason)
        if stats is not None:
            if status is InspectionStatus.SUCCESS:
                stats.inc_succeeded()
            else:
                stats.inc_failed()
        return status
