"""Typed outcomes and views returned by the SCA backend client."""
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

ALREADY_IN_BOM = 412
UNAUTHORIZED = 401


@dataclass(frozen=True)
class ComponentAdded:
    component_url: str | None = None


@dataclass(frozen=True)
class HttpStatusFailure:
    status_code: int
    message: str = ''


@dataclass(frozen=True)
class ComponentMatchFailure:
    origin_id: str
    message: str = ''


AddComponentResult = ComponentAdded | HttpStatusFailure | ComponentMatchFailure


class BomComponent(BaseModel):
    """A component entry in a project version's bill of materials."""
    component_name: str = Field(alias='componentName')
    component_version_name: str | None = Field(default=None, alias='componentVersionName')
    policy_status: str | None = Field(default=None, alias='policyStatus')
    meta: dict[str, Any] = Field(default_factory=dict, alias='_meta')

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    @property
    def href(self) -> str | None:
        return self.meta.get('href')

    def link(self, rel: str) -> str | None:
        for link in self.meta.get('links', []):
            if link.get('rel') == rel:
                return link.get('href')
        return None
