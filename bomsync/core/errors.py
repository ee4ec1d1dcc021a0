"""Exception hierarchy for bomsync."""


class BomSyncError(Exception):
    """Base class for all bomsync errors."""


class ConfigValidationError(BomSyncError):
    """A module configuration failed validation."""

    def __init__(self, module_name: str, errors: list[str]):
        self.module_name = module_name
        self.errors = errors
        super().__init__(f"Invalid configuration for {module_name}: {'; '.join(errors)}")


class BackendError(BomSyncError):
    """The SCA backend returned a response that could not be used."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class RepositoryManagerError(BomSyncError):
    """The repository manager REST API failed."""
