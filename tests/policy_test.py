from unittest.mock import MagicMock

from bomsync.models.backend import BomComponent
from bomsync.models.policy import PolicyRuleSeverity
from bomsync.models.policy import PolicyStatus
from bomsync.models.policy import PolicyStatusReport


def component(policy_status):
    return BomComponent.model_validate({'componentName': 'left-pad', 'policyStatus': policy_status})


def test_from_component_maps_severities():
    backend = MagicMock()
    backend.get_policy_rules.return_value = [
        {'severity': 'BLOCKER'},
        {'severity': 'minor'},
        {'severity': 'apocalyptic'},
        {},
    ]

    report = PolicyStatusReport.from_component(component('IN_VIOLATION'), backend)

    assert report.policy_status is PolicyStatus.IN_VIOLATION
    assert report.severities == [
        PolicyRuleSeverity.BLOCKER,
        PolicyRuleSeverity.MINOR,
        PolicyRuleSeverity.UNRECOGNIZED,
        PolicyRuleSeverity.UNRECOGNIZED,
    ]


def test_unknown_policy_status():
    backend = MagicMock()
    backend.get_policy_rules.return_value = []

    report = PolicyStatusReport.from_component(component('SOMETHING_NEW'), backend)

    assert report.policy_status is PolicyStatus.UNRECOGNIZED
    assert report.severities == []
