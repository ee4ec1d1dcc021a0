from enum import Enum
from typing import Protocol

import structlog
from pydantic import BaseModel

from bomsync.models.backend import BomComponent

logger = structlog.get_logger('policy')


class _CaseInsensitiveEnum(str, Enum):
    @classmethod
    def from_value(cls, raw: str | None):
        """Lookup ignoring case; anything unknown maps to UNRECOGNIZED."""
        if raw:
            for member in cls:
                if member.value.lower() == raw.strip().lower():
                    return member
        return cls.UNRECOGNIZED

    def __str__(self) -> str:
        return self.value


class PolicyStatus(_CaseInsensitiveEnum):
    IN_VIOLATION = 'IN_VIOLATION'
    IN_VIOLATION_OVERRIDDEN = 'IN_VIOLATION_OVERRIDDEN'
    NOT_IN_VIOLATION = 'NOT_IN_VIOLATION'
    UNRECOGNIZED = 'UNRECOGNIZED'


class PolicyRuleSeverity(_CaseInsensitiveEnum):
    BLOCKER = 'BLOCKER'
    CRITICAL = 'CRITICAL'
    MAJOR = 'MAJOR'
    MINOR = 'MINOR'
    TRIVIAL = 'TRIVIAL'
    UNSPECIFIED = 'UNSPECIFIED'
    UNRECOGNIZED = 'UNRECOGNIZED'


class PolicyRuleSource(Protocol):
    def get_policy_rules(self, component: BomComponent) -> list[dict]:
        ...


class PolicyStatusReport(BaseModel):
    policy_status: PolicyStatus
    severities: list[PolicyRuleSeverity] = []

    @classmethod
    def from_component(cls, component: BomComponent, backend: PolicyRuleSource) -> 'PolicyStatusReport':
        policy_status = PolicyStatus.from_value(component.policy_status)
        severities = []
        for rule in backend.get_policy_rules(component):
            severity = PolicyRuleSeverity.from_value(rule.get('severity'))
            if severity is PolicyRuleSeverity.UNRECOGNIZED:
                logger.debug(
                    'Unrecognized policy rule severity',
                    component=component.component_name,
                    severity=rule.get('severity'),
                )
            severities.append(severity)
        return cls(policy_status=policy_status, severities=severities)
