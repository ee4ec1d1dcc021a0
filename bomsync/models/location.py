from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import field_validator


class ArtifactLocation(BaseModel):
    """A file (or the repository root, when ``path`` is empty) inside a repository."""
    repo_key: str
    path: str = ''

    model_config = ConfigDict(frozen=True)

    @field_validator('path', mode='before')
    @classmethod
    def normalize_path(cls, v: str | None) -> str:
        return (v or '').strip('/')

    @classmethod
    def root(cls, repo_key: str) -> 'ArtifactLocation':
        return cls(repo_key=repo_key)

    @classmethod
    def parse(cls, full_path: str) -> 'ArtifactLocation':
        """Build a location from ``repo-key/some/path``."""
        repo_key, _, path = full_path.strip('/').partition('/')
        return cls(repo_key=repo_key, path=path)

    @property
    def is_root(self) -> bool:
        return not self.path

    @property
    def name(self) -> str:
        return self.path.rsplit('/', 1)[-1] if self.path else self.repo_key

    def __str__(self) -> str:
        return f"{self.repo_key}/{self.path}" if self.path else self.repo_key
