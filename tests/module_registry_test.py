from dataclasses import dataclass

import pytest

from bomsync.services.module_registry import Module
from bomsync.services.module_registry import ModuleConfig
from bomsync.services.module_registry import ModuleRegistry
from bomsync.services.module_registry import to_boolean


@dataclass
class StubConfig(ModuleConfig):
    valid: bool = True

    def validate(self) -> list[str]:
        return [] if self.valid else ['broken']


class StubModule(Module):
    def __init__(self, name: str, valid: bool = True):
        self._config = StubConfig(module_name=name, valid=valid)

    @property
    def module_config(self) -> StubConfig:
        return self._config


@pytest.fixture
def registry():
    registry = ModuleRegistry()
    registry.register_modules(StubModule('InspectionModule'), StubModule('PolicyModule', valid=False))
    return registry


@pytest.mark.parametrize('raw, expected', [
    ('true', True), ('YES', True), ('on', True), ('y', True), ('t', True),
    ('false', False), ('0', False), ('1', False), ('', False), (None, False), ('maybe', False),
])
def test_to_boolean(raw, expected):
    assert to_boolean(raw) is expected


def test_invalid_modules_are_disabled_but_listed(registry):
    assert [c.module_name for c in registry.get_module_configs()] == ['InspectionModule']
    all_configs = registry.get_all_module_configs()
    assert [c.module_name for c in all_configs] == ['InspectionModule', 'PolicyModule']
    assert all_configs[1].enabled is False


def test_lookup_is_case_insensitive(registry):
    assert registry.get_first_module_config_by_name('inspectionmodule').module_name == 'InspectionModule'
    assert registry.get_first_module_config_by_name('PolicyModule') is None


def test_set_modules_state_uses_first_value(registry):
    registry.set_modules_state({'InspectionModule': ['false', 'true'], 'Unknown': ['true'], 'Empty': []})
    assert registry.get_first_module_config_by_name('InspectionModule').enabled is False


def test_set_all_modules_enabled_state(registry):
    registry.set_all_modules_enabled_state(True)
    assert all(config.enabled for config in registry.get_all_module_configs())
