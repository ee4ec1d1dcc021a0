import threading
from collections.abc import Iterable
from pathlib import Path

import structlog

from bomsync.models import identity as forges
from bomsync.models.identity import ExternalIdentity
from bomsync.models.identity import IdentifiedArtifact
from bomsync.models.manifest import Dependency
from bomsync.models.manifest import DependencyGraph
from bomsync.models.manifest import Manifest
from bomsync.services.identification_service import IdentificationService

logger = structlog.get_logger('manifest_service')


class ManifestService:
    """Builds BDIO manifests for whole repositories and writes them to the scratch directory."""

    def __init__(self, identification: IdentificationService, manifest_dir: Path):
        self.identification = identification
        self.manifest_dir = Path(manifest_dir)
        self._locks: dict[Path, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def build_manifest(
        self,
        project_name: str,
        project_version_name: str,
        ecosystem: str,
        artifacts: Iterable[IdentifiedArtifact],
    ) -> Manifest:
        graph = DependencyGraph()
        for artifact in artifacts:
            self.identification.populate_metadata(artifact)
            if isinstance(artifact.identity, ExternalIdentity):
                graph.add_child_to_root(Dependency.from_identity(artifact.identity))

        project_identity = ExternalIdentity(
            forge=forges.ARTIFACTORY,
            name=project_name,
            version=project_version_name,
        )
        code_location_name = '/'.join([project_name, project_version_name, ecosystem])
        logger.info(
            'Built manifest', code_location=code_location_name,
            components=len(graph),
        )
        return Manifest(
            code_location_name=code_location_name,
            project_name=project_name,
            project_version_name=project_version_name,
            project_identity=project_identity,
            graph=graph,
        )

    def manifest_path(self, manifest: Manifest) -> Path:
        return self.manifest_dir / manifest.file_name

    def lock_for(self, path: Path) -> threading.Lock:
        """Exclusive lock guarding one manifest path for write-then-submit."""
        with self._locks_guard:
            return self._locks.setdefault(path, threading.Lock())

    def write_manifest(self, manifest: Manifest) -> Path:
        """Replace any earlier manifest at the same path. Callers hold ``lock_for(path)``."""
        path = self.manifest_path(manifest)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.unlink(missing_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(manifest.to_json())
        logger.debug('Wrote manifest', path=str(path))
        return path
