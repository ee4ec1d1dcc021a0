from collections.abc import Mapping

import structlog

logger = structlog.get_logger('pattern_service')


class PackageTypePatternService:
    """Filename glob patterns used to discover artifacts, keyed by ecosystem."""

    def __init__(self, patterns: Mapping[str, str]):
        self._patterns = {
            key.strip().lower(): value.strip()
            for key, value in patterns.items()
            if key and value and value.strip()
        }

    def get_pattern(self, ecosystem: str | None) -> str | None:
        """Comma-joined pattern list, or None when the ecosystem is unsupported."""
        if not ecosystem:
            return None
        return self._patterns.get(ecosystem.strip().lower())

    def get_patterns(self, ecosystem: str | None) -> list[str]:
        pattern = self.get_pattern(ecosystem)
        if not pattern:
            return []
        return [p.strip() for p in pattern.split(',') if p.strip()]

    @property
    def ecosystems(self) -> list[str]:
        return sorted(self._patterns)
