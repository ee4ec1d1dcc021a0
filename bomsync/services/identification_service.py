import structlog

from bomsync.core.repository import PropertyStore
from bomsync.core.repository import RepositorySearch
from bomsync.models.identity import ExternalIdentity
from bomsync.models.identity import IdentifiedArtifact
from bomsync.models.identity import NoIdentity
from bomsync.models.inspection import InspectionStatus
from bomsync.models.inspection import SyncProperty
from bomsync.models.location import ArtifactLocation
from bomsync.models.package_type import PackageType
from bomsync.models.package_type import RecognizerFactory
from bomsync.services.status_service import InspectionStatusService

logger = structlog.get_logger('identification_service')

NO_IDENTIFIER_FOUND = 'No external identifier found'


class IdentificationService:
    """Derives external identities for artifacts and records them as properties."""

    def __init__(
        self,
        search: RepositorySearch,
        store: PropertyStore,
        status_service: InspectionStatusService,
    ):
        self.search = search
        self.store = store
        self.status_service = status_service

    def resolve(self, location: ArtifactLocation, ecosystem: str) -> IdentifiedArtifact:
        """Never raises for an unidentifiable artifact; the result carries a NoIdentity instead."""
        package_type = PackageType.from_ecosystem(ecosystem)
        if package_type is None:
            return IdentifiedArtifact(location, NoIdentity(f"Package type not supported: {ecosystem}"))

        layout = self.search.get_layout_info(location)
        properties = self.search.get_properties(location)
        identity = RecognizerFactory.get_recognizer(package_type).recognize(layout, properties)
        return IdentifiedArtifact(location, identity)

    def populate_metadata(self, artifact: IdentifiedArtifact) -> None:
        location = artifact.location
        match artifact.identity:
            case NoIdentity(reason=reason):
                logger.debug(
                    'Missing external identity', path=str(location),
                    reason=reason,
                )
                self.status_service.set_inspection_status(
                    location, InspectionStatus.FAILURE, NO_IDENTIFIER_FOUND,
                )
            case ExternalIdentity() as identity:
                self.store.set_property(location, str(SyncProperty.ORIGIN_ID), identity.origin_id)
                self.store.set_property(location, str(SyncProperty.FORGE), identity.forge.name)
                self.status_service.set_inspection_status(location, InspectionStatus.PENDING)
