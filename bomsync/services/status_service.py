from datetime import datetime
from datetime import timezone

import structlog

from bomsync.core.repository import PropertyStore
from bomsync.core.repository import RepositorySearch
from bomsync.models.inspection import InspectionStatus
from bomsync.models.inspection import SyncProperty
from bomsync.models.location import ArtifactLocation

logger = structlog.get_logger('status_service')


class InspectionStatusService:
    """Reads and writes inspection status properties on repository items."""

    def __init__(
        self,
        search: RepositorySearch,
        store: PropertyStore,
        default_project_version_name: str,
    ):
        self.search = search
        self.store = store
        self.default_project_version_name = default_project_version_name

    def get_inspection_status(self, location: ArtifactLocation) -> InspectionStatus | None:
        raw = self.search.get_properties(location).get(str(SyncProperty.INSPECTION_STATUS))
        status = InspectionStatus.from_value(raw)
        if raw and status is None:
            logger.warning(
                'Ignoring unknown inspection status',
                path=str(location), value=raw,
            )
        return status

    def get_inspection_status_message(self, location: ArtifactLocation) -> str | None:
        return self.search.get_properties(location).get(str(SyncProperty.INSPECTION_STATUS_MESSAGE))

    def has_inspection_status(self, location: ArtifactLocation, status: InspectionStatus) -> bool:
        return self.get_inspection_status(location) is status

    def set_inspection_status(
        self,
        location: ArtifactLocation,
        status: InspectionStatus,
        reason: str | None = None,
    ) -> None:
        """Overwrite the status. A status without a reason clears any earlier reason."""
        self.store.set_property(location, str(SyncProperty.INSPECTION_STATUS), status.value)
        if reason:
            self.store.set_property(location, str(SyncProperty.INSPECTION_STATUS_MESSAGE), reason)
        else:
            self.store.delete_property(location, str(SyncProperty.INSPECTION_STATUS_MESSAGE))
        self.store.set_property(
            location,
            str(SyncProperty.LAST_INSPECTION),
            datetime.now(timezone.utc).isoformat(),
        )
        logger.debug(
            'Inspection status updated', path=str(location),
            status=status.value, reason=reason,
        )

    def get_repo_project_name(self, repo_key: str) -> str:
        properties = self.search.get_properties(ArtifactLocation.root(repo_key))
        return properties.get(str(SyncProperty.PROJECT_NAME)) or repo_key

    def get_repo_project_version_name(self, repo_key: str) -> str:
        properties = self.search.get_properties(ArtifactLocation.root(repo_key))
        return properties.get(str(SyncProperty.PROJECT_VERSION_NAME)) or self.default_project_version_name
