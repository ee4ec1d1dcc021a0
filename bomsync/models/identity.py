from dataclasses import dataclass
from urllib.parse import quote

from pydantic import BaseModel
from pydantic import ConfigDict

from bomsync.models.location import ArtifactLocation


class Forge(BaseModel):
    """A component namespace on the SCA backend (maven, npmjs, pypi, ...)."""
    name: str
    separator: str = '/'
    kb_separator: str = '/'

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


MAVEN = Forge(name='maven', separator=':', kb_separator=':')
NPMJS = Forge(name='npmjs', separator='@', kb_separator='/')
PYPI = Forge(name='pypi', separator='/', kb_separator='/')
NUGET = Forge(name='nuget', separator='/', kb_separator='/')
RUBYGEMS = Forge(name='rubygems', separator='=', kb_separator='/')
PACKAGIST = Forge(name='packagist', separator=':', kb_separator=':')
ANACONDA = Forge(name='anaconda', separator='=', kb_separator='/')
CRAN = Forge(name='cran', separator='/', kb_separator='/')
GOLANG = Forge(name='golang', separator=':', kb_separator=':')
COCOAPODS = Forge(name='cocoapods', separator=':', kb_separator=':')
BOWER = Forge(name='bower', separator='#', kb_separator='/')

# Synthetic namespace for the project node of a submitted manifest.
ARTIFACTORY = Forge(name='artifactory', separator='/', kb_separator='/')


class ExternalIdentity(BaseModel):
    """Canonical cross-system identity of a component."""
    forge: Forge
    name: str
    version: str
    group: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def pieces(self) -> list[str]:
        if self.group:
            return [self.group, self.name, self.version]
        return [self.name, self.version]

    @property
    def origin_id(self) -> str:
        """Join key for the component on the backend."""
        return self.forge.kb_separator.join(self.pieces)

    @property
    def key(self) -> tuple[str, ...]:
        return (self.forge.name, *self.pieces)

    @property
    def bdio_id(self) -> str:
        escaped = '/'.join(quote(piece, safe='') for piece in self.pieces)
        return f"http:{self.forge.name}/{escaped}"

    def __str__(self) -> str:
        return f"{self.forge.name}:{self.origin_id}"


@dataclass(frozen=True)
class NoIdentity:
    """Explicit result for an artifact that no recognizer could identify."""
    reason: str


@dataclass(frozen=True)
class IdentifiedArtifact:
    location: ArtifactLocation
    identity: ExternalIdentity | NoIdentity

    @property
    def has_identity(self) -> bool:
        return isinstance(self.identity, ExternalIdentity)
