from enum import Enum


class InspectionStatus(str, Enum):
    """Progress of an artifact (or a whole repository) through identification and reporting."""
    PENDING = 'PENDING'
    SUCCESS = 'SUCCESS'
    FAILURE = 'FAILURE'

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_value(cls, raw: str | None) -> 'InspectionStatus | None':
        if not raw:
            return None
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return None


class SyncProperty(str, Enum):
    """Property keys bomsync stores on repository manager items."""
    INSPECTION_STATUS = 'bomsync.inspectionStatus'
    INSPECTION_STATUS_MESSAGE = 'bomsync.inspectionStatusMessage'
    LAST_INSPECTION = 'bomsync.lastInspection'
    ORIGIN_ID = 'bomsync.originId'
    FORGE = 'bomsync.forge'
    PROJECT_NAME = 'bomsync.projectName'
    PROJECT_VERSION_NAME = 'bomsync.projectVersionName'

    def __str__(self) -> str:
        return self.value
