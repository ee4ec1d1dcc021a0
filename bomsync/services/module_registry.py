from abc import ABC
from abc import abstractmethod
from dataclasses import dataclass

import structlog

from bomsync.core.errors import ConfigValidationError

logger = structlog.get_logger('module_registry')

TRUE_VALUES = {'true', 'yes', 'on', 'y', 't'}


def to_boolean(raw: str | None) -> bool:
    return (raw or '').strip().lower() in TRUE_VALUES


@dataclass
class ModuleConfig:
    module_name: str
    enabled: bool = True

    def validate(self) -> list[str]:
        """Return the validation errors; an empty list means the config is usable."""
        return []


class Module(ABC):
    @property
    @abstractmethod
    def module_config(self) -> ModuleConfig:
        ...


class ModuleRegistry:
    """Ledger of feature modules. Only modules with a valid configuration are registered."""

    def __init__(self):
        self._registered: list[Module] = []
        self._all: list[Module] = []

    def register_modules(self, *modules: Module) -> None:
        for module in modules:
            self._register_module(module)

    def _register_module(self, module: Module) -> None:
        config = module.module_config
        errors = config.validate()
        self._all.append(module)
        if errors:
            config.enabled = False
            logger.warning(
                "Can't register module due to an invalid configuration",
                module=config.module_name,
                error=str(ConfigValidationError(config.module_name, errors)),
            )
            return
        self._registered.append(module)
        logger.info('Registered module', module=config.module_name)

    def set_modules_state(self, params: dict[str, list[str]]) -> None:
        """Apply ``{module name: [state, ...]}``; only the first value of each entry counts."""
        for module_name, values in params.items():
            if not values:
                continue
            state = to_boolean(values[0])
            configs = self.get_module_configs_by_name(module_name)
            if not configs:
                logger.warning('No registered module with that name', module=module_name)
                continue
            for config in configs:
                logger.warning('Setting module enabled state', module=config.module_name, enabled=state)
                config.enabled = state

    def get_module_configs(self) -> list[ModuleConfig]:
        return [module.module_config for module in self._registered]

    def get_all_module_configs(self) -> list[ModuleConfig]:
        return [module.module_config for module in self._all]

    def get_module_configs_by_name(self, module_name: str) -> list[ModuleConfig]:
        return [
            config for config in self.get_module_configs()
            if config.module_name.lower() == module_name.lower()
        ]

    def get_first_module_config_by_name(self, module_name: str) -> ModuleConfig | None:
        configs = self.get_module_configs_by_name(module_name)
        return configs[0] if configs else None

    def set_all_modules_enabled_state(self, enabled: bool) -> None:
        for config in self.get_all_module_configs():
            config.enabled = enabled
