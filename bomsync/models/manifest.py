"""Dependency graph and its BDIO (JSON-LD) serialization."""
import json
import re
import uuid
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timezone

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from bomsync.__version__ import __version__
from bomsync.models.identity import ExternalIdentity

BDIO_SPECIFICATION_VERSION = '1.1.0'
DYNAMIC_LINK = 'DYNAMIC_LINK'

_UNSAFE_CHARS = re.compile(r'[^A-Za-z0-9]')


def escape_for_uri(name: str) -> str:
    """Replace every character outside [A-Za-z0-9] with an underscore."""
    return _UNSAFE_CHARS.sub('_', name)


@dataclass(frozen=True)
class Dependency:
    name: str
    version: str
    identity: ExternalIdentity

    @classmethod
    def from_identity(cls, identity: ExternalIdentity) -> 'Dependency':
        return cls(name=identity.name, version=identity.version, identity=identity)


class DependencyGraph:
    """A graph with a single level of children under an implicit root."""

    def __init__(self):
        self._root_children: dict[tuple[str, ...], Dependency] = {}

    def add_child_to_root(self, dependency: Dependency) -> bool:
        """Add a child keyed by its identity. Returns False for a duplicate."""
        key = dependency.identity.key
        if key in self._root_children:
            return False
        self._root_children[key] = dependency
        return True

    @property
    def root_dependencies(self) -> list[Dependency]:
        return list(self._root_children.values())

    def __len__(self) -> int:
        return len(self._root_children)


class ExternalIdentifier(BaseModel):
    external_system_type_id: str = Field(alias='externalSystemTypeId')
    external_id: str = Field(alias='externalId')

    model_config = ConfigDict(populate_by_name=True)


class Relationship(BaseModel):
    related: str
    relationship_type: str = Field(default=DYNAMIC_LINK, alias='relationshipType')

    model_config = ConfigDict(populate_by_name=True)


class BdioNode(BaseModel):
    id: str = Field(alias='@id')
    type: str = Field(alias='@type')

    model_config = ConfigDict(populate_by_name=True)


class BillOfMaterialsNode(BdioNode):
    type: str = Field(default='BillOfMaterials', alias='@type')
    spdx_name: str = Field(alias='spdx:name')
    bdio_specification_version: str = Field(
        default=BDIO_SPECIFICATION_VERSION, alias='bdioSpecificationVersion',
    )
    creation_info: dict = Field(default_factory=dict, alias='creationInfo')


class ComponentNode(BdioNode):
    type: str = Field(default='Component', alias='@type')
    name: str
    revision: str
    bdio_external_identifier: ExternalIdentifier = Field(alias='bdioExternalIdentifier')
    relationship: list[Relationship] = Field(default_factory=list)


class ProjectNode(ComponentNode):
    type: str = Field(default='Project', alias='@type')


@dataclass
class Manifest:
    """One project version's bill of materials, ready to be written and submitted."""
    code_location_name: str
    project_name: str
    project_version_name: str
    project_identity: ExternalIdentity
    graph: DependencyGraph
    bom_id: str = field(default_factory=lambda: f"uuid:{uuid.uuid4()}")
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def file_name(self) -> str:
        return escape_for_uri(self.code_location_name)

    def nodes(self) -> list[BdioNode]:
        components = [
            ComponentNode(
                id=dep.identity.bdio_id,
                name=dep.name,
                revision=dep.version,
                bdio_external_identifier=ExternalIdentifier(
                    external_system_type_id=dep.identity.forge.name,
                    external_id=dep.identity.origin_id,
                ),
            )
            for dep in self.graph.root_dependencies
        ]
        project = ProjectNode(
            id=self.project_identity.bdio_id,
            name=self.project_name,
            revision=self.project_version_name,
            bdio_external_identifier=ExternalIdentifier(
                external_system_type_id=self.project_identity.forge.name,
                external_id=self.project_identity.origin_id,
            ),
            relationship=[Relationship(related=c.id) for c in components],
        )
        bom = BillOfMaterialsNode(
            id=self.bom_id,
            spdx_name=f"{self.code_location_name} Black Duck I/O Export",
            creation_info={
                'spdx:created': self.created_at.isoformat(),
                'spdx:creator': [f"Tool: bomsync-{__version__}"],
            },
        )
        return [bom, project, *components]

    def to_document(self) -> list[dict]:
        return [node.model_dump(by_alias=True) for node in self.nodes()]

    def to_json(self) -> str:
        return json.dumps(self.to_document(), indent=2, ensure_ascii=False)
