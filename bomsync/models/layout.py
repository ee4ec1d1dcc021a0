from pydantic import BaseModel
from pydantic import ConfigDict

SNAPSHOT_SUFFIX = '-SNAPSHOT'


class LayoutInfo(BaseModel):
    """Module coordinates the repository manager derives from an item's path."""
    organization: str | None = None
    module: str | None = None
    base_revision: str | None = None
    folder_integration_revision: str | None = None
    file_integration_revision: str | None = None
    classifier: str | None = None
    ext: str | None = None

    model_config = ConfigDict(frozen=True, extra='ignore')

    @property
    def is_valid(self) -> bool:
        return bool(self.organization and self.module and self.base_revision)

    @property
    def revision(self) -> str | None:
        """Full version string, including any integration revision."""
        if not self.base_revision:
            return None
        if self.file_integration_revision:
            return f"{self.base_revision}-{self.file_integration_revision}"
        if self.folder_integration_revision:
            return f"{self.base_revision}-{self.folder_integration_revision}"
        return self.base_revision

    @classmethod
    def from_maven_path(cls, path: str) -> 'LayoutInfo':
        """
        Parse ``org/path/module/baseRev/module-baseRev[-fileItegRev][-classifier].ext``.

        Paths that do not follow the layout produce an invalid (empty) LayoutInfo.
        """
        parts = [p for p in path.strip('/').split('/') if p]
        if len(parts) < 4:
            return cls()

        file_name, folder_revision, module = parts[-1], parts[-2], parts[-3]
        organization = '.'.join(parts[:-3])

        base_revision = folder_revision
        folder_integration = None
        if folder_revision.endswith(SNAPSHOT_SUFFIX):
            base_revision = folder_revision[:-len(SNAPSHOT_SUFFIX)]
            folder_integration = 'SNAPSHOT'

        prefix = f"{module}-{base_revision}"
        if not file_name.startswith(prefix):
            return cls()

        remainder = file_name[len(prefix):]
        stem, dot, ext = remainder.rpartition('.')
        if not dot:
            stem, ext = remainder, ''
        elif stem.startswith('.'):
            # Compound extension such as .tar.gz
            stem, ext = '', f"{stem[1:]}.{ext}"

        file_integration = None
        classifier = None
        if stem.startswith('-SNAPSHOT'):
            file_integration = 'SNAPSHOT'
            stem = stem[len('-SNAPSHOT'):]
        elif folder_integration and stem.startswith('-'):
            # Timestamped snapshot: -yyyyMMdd.HHmmss-build[-classifier]
            pieces = stem[1:].split('-')
            if len(pieces) >= 2 and pieces[1].isdigit():
                file_integration = f"{pieces[0]}-{pieces[1]}"
                stem = '-' + '-'.join(pieces[2:]) if len(pieces) > 2 else ''
        if stem.startswith('-') and len(stem) > 1:
            classifier = stem[1:]
        elif stem:
            return cls()

        return cls(
            organization=organization,
            module=module,
            base_revision=base_revision,
            folder_integration_revision=folder_integration,
            file_integration_revision=file_integration,
            classifier=classifier,
            ext=ext or None,
        )
