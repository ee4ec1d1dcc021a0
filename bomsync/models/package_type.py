from abc import ABC
from abc import abstractmethod
from collections.abc import Mapping
from enum import Enum

from bomsync.models import identity as forges
from bomsync.models.identity import ExternalIdentity
from bomsync.models.identity import Forge
from bomsync.models.identity import NoIdentity
from bomsync.models.layout import LayoutInfo


class PackageType(str, Enum):
    """Repository ecosystems bomsync knows how to identify artifacts for."""
    MAVEN = 'maven'
    GRADLE = 'gradle'
    IVY = 'ivy'
    SBT = 'sbt'
    NPM = 'npm'
    PYPI = 'pypi'
    NUGET = 'nuget'
    GEMS = 'gems'
    COMPOSER = 'composer'
    CONDA = 'conda'
    CRAN = 'cran'
    GO = 'go'
    COCOAPODS = 'cocoapods'
    BOWER = 'bower'

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_ecosystem(cls, ecosystem: str | None) -> 'PackageType | None':
        if not ecosystem:
            return None
        try:
            return cls(ecosystem.strip().lower())
        except ValueError:
            return None


class BaseRecognizer(ABC):
    @abstractmethod
    def recognize(self, layout: LayoutInfo, properties: Mapping[str, str]) -> ExternalIdentity | NoIdentity:
        ...


class LayoutRecognizer(BaseRecognizer):
    """Maven-style coordinates taken from the repository layout."""

    def __init__(self, forge: Forge):
        self.forge = forge

    def recognize(self, layout: LayoutInfo, properties: Mapping[str, str]) -> ExternalIdentity | NoIdentity:
        if not layout.is_valid:
            return NoIdentity('Artifact path does not match the repository layout')
        return ExternalIdentity(
            forge=self.forge,
            group=layout.organization,
            name=layout.module,
            version=layout.revision,
        )


class PropertyRecognizer(BaseRecognizer):
    """Name and version read from properties the repository manager stores on upload."""

    def __init__(self, forge: Forge, name_key: str, version_key: str):
        self.forge = forge
        self.name_key = name_key
        self.version_key = version_key

    def recognize(self, layout: LayoutInfo, properties: Mapping[str, str]) -> ExternalIdentity | NoIdentity:
        name = (properties.get(self.name_key) or '').strip()
        version = (properties.get(self.version_key) or '').strip()
        if not name or not version:
            missing = [k for k, v in ((self.name_key, name), (self.version_key, version)) if not v]
            return NoIdentity(f"Missing properties: {', '.join(missing)}")
        return ExternalIdentity(forge=self.forge, name=name, version=version)


class RecognizerFactory:
    _MAPPING = {
        PackageType.MAVEN: lambda: LayoutRecognizer(forges.MAVEN),
        PackageType.GRADLE: lambda: LayoutRecognizer(forges.MAVEN),
        PackageType.IVY: lambda: LayoutRecognizer(forges.MAVEN),
        PackageType.SBT: lambda: LayoutRecognizer(forges.MAVEN),
        PackageType.NPM: lambda: PropertyRecognizer(forges.NPMJS, 'npm.name', 'npm.version'),
        PackageType.PYPI: lambda: PropertyRecognizer(forges.PYPI, 'pypi.name', 'pypi.version'),
        PackageType.NUGET: lambda: PropertyRecognizer(forges.NUGET, 'nuget.id', 'nuget.version'),
        PackageType.GEMS: lambda: PropertyRecognizer(forges.RUBYGEMS, 'gem.name', 'gem.version'),
        PackageType.COMPOSER: lambda: PropertyRecognizer(forges.PACKAGIST, 'composer.name', 'composer.version'),
        PackageType.CONDA: lambda: PropertyRecognizer(forges.ANACONDA, 'conda.name', 'conda.version'),
        PackageType.CRAN: lambda: PropertyRecognizer(forges.CRAN, 'cran.name', 'cran.version'),
        PackageType.GO: lambda: PropertyRecognizer(forges.GOLANG, 'go.name', 'go.version'),
        PackageType.COCOAPODS: lambda: PropertyRecognizer(forges.COCOAPODS, 'pods.name', 'pods.version'),
        PackageType.BOWER: lambda: PropertyRecognizer(forges.BOWER, 'bower.name', 'bower.version'),
    }

    @staticmethod
    def get_recognizer(package_type: PackageType) -> BaseRecognizer:
        recognizer_cls = RecognizerFactory._MAPPING.get(package_type)
        if recognizer_cls:
            return recognizer_cls()
        raise ValueError(f"Unsupported package type: {package_type}")
