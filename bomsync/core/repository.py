"""Contracts for the repository manager, plus an in-memory implementation."""
import fnmatch
import threading
from abc import ABC
from abc import abstractmethod

from bomsync.models.layout import LayoutInfo
from bomsync.models.location import ArtifactLocation
from bomsync.models.package_type import PackageType

MAVEN_LAYOUT_TYPES = {PackageType.MAVEN, PackageType.GRADLE, PackageType.IVY, PackageType.SBT}


class RepositorySearch(ABC):
    """Read side of the repository manager."""

    @abstractmethod
    def find_by_name_pattern(self, pattern: str, repo_key: str) -> list[ArtifactLocation]:
        ...

    @abstractmethod
    def get_repository_ecosystem(self, repo_key: str) -> str:
        ...

    @abstractmethod
    def get_layout_info(self, location: ArtifactLocation) -> LayoutInfo:
        ...

    @abstractmethod
    def get_properties(self, location: ArtifactLocation) -> dict[str, str]:
        ...

    @abstractmethod
    def get_artifact_count(self, repo_key: str) -> int:
        ...


class PropertyStore(ABC):
    """Write side: key/value properties scoped to a location."""

    @abstractmethod
    def set_property(self, location: ArtifactLocation, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete_property(self, location: ArtifactLocation, key: str) -> None:
        ...


class InMemoryRepositoryManager(RepositorySearch, PropertyStore):
    """Dictionary-backed repository manager for embedding hosts and tests."""

    def __init__(self):
        self._ecosystems: dict[str, str] = {}
        self._files: dict[str, set[ArtifactLocation]] = {}
        self._layouts: dict[ArtifactLocation, LayoutInfo] = {}
        self._properties: dict[ArtifactLocation, dict[str, str]] = {}
        self._lock = threading.Lock()

    def add_repository(self, repo_key: str, ecosystem: str) -> None:
        with self._lock:
            self._ecosystems[repo_key] = ecosystem
            self._files.setdefault(repo_key, set())

    def add_artifact(
        self,
        repo_key: str,
        path: str,
        properties: dict[str, str] | None = None,
        layout: LayoutInfo | None = None,
    ) -> ArtifactLocation:
        location = ArtifactLocation(repo_key=repo_key, path=path)
        with self._lock:
            if repo_key not in self._ecosystems:
                raise KeyError(f"Unknown repository: {repo_key}")
            self._files[repo_key].add(location)
            if properties:
                self._properties.setdefault(location, {}).update(properties)
            if layout is not None:
                self._layouts[location] = layout
        return location

    def find_by_name_pattern(self, pattern: str, repo_key: str) -> list[ArtifactLocation]:
        with self._lock:
            files = list(self._files.get(repo_key, ()))
        return [loc for loc in files if fnmatch.fnmatchcase(loc.name, pattern)]

    def get_repository_ecosystem(self, repo_key: str) -> str:
        with self._lock:
            try:
                return self._ecosystems[repo_key]
            except KeyError:
                raise KeyError(f"Unknown repository: {repo_key}") from None

    def get_layout_info(self, location: ArtifactLocation) -> LayoutInfo:
        with self._lock:
            layout = self._layouts.get(location)
            ecosystem = self._ecosystems.get(location.repo_key)
        if layout is not None:
            return layout
        if PackageType.from_ecosystem(ecosystem) in MAVEN_LAYOUT_TYPES:
            return LayoutInfo.from_maven_path(location.path)
        return LayoutInfo()

    def get_properties(self, location: ArtifactLocation) -> dict[str, str]:
        with self._lock:
            return dict(self._properties.get(location, {}))

    def get_artifact_count(self, repo_key: str) -> int:
        with self._lock:
            return len(self._files.get(repo_key, ()))

    def set_property(self, location: ArtifactLocation, key: str, value: str) -> None:
        with self._lock:
            self._properties.setdefault(location, {})[key] = value

    def delete_property(self, location: ArtifactLocation, key: str) -> None:
        with self._lock:
            self._properties.get(location, {}).pop(key, None)
