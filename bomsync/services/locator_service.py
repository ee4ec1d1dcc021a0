import structlog

from bomsync.core.repository import RepositorySearch
from bomsync.models.location import ArtifactLocation
from bomsync.services.pattern_service import PackageTypePatternService

logger = structlog.get_logger('locator_service')


class ArtifactLocatorService:
    """Finds the artifacts in a repository that are worth identifying."""

    def __init__(self, search: RepositorySearch, patterns: PackageTypePatternService):
        self.search = search
        self.patterns = patterns

    def get_identifiable_artifacts(self, repo_key: str) -> set[ArtifactLocation]:
        """
        Union of the by-name search results for every pattern registered for
        the repository's ecosystem. An ecosystem without patterns yields an
        empty set.
        """
        ecosystem = self.search.get_repository_ecosystem(repo_key)
        patterns = self.patterns.get_patterns(ecosystem)
        if not patterns:
            logger.info(
                'No patterns configured for ecosystem',
                repo=repo_key, ecosystem=ecosystem,
            )
            return set()

        locations: set[ArtifactLocation] = set()
        for pattern in patterns:
            found = self.search.find_by_name_pattern(pattern, repo_key)
            logger.debug(
                'Pattern search', repo=repo_key,
                pattern=pattern, found=len(found),
            )
            locations.update(found)
        return locations

    def get_artifact_count(self, repo_keys: list[str]) -> int:
        return sum(self.search.get_artifact_count(repo_key) for repo_key in repo_keys)
