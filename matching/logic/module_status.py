"""
Module Status

Summarizes, per module tab, whether the student is on defaults, has changed
every filter, or only some of them.
"""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel

from .constants import DEFAULT_WEIGHTS, ModuleName
from .contracts import Criteria


class ModuleStatus(str, Enum):
    DISABLED = "disabled"
    DEFAULT = "default"
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"


STATUS_LABEL: Dict[ModuleStatus, str] = {
    ModuleStatus.DISABLED: "Disabled",
    ModuleStatus.DEFAULT: "Using defaults",
    ModuleStatus.COMPLETE: "Custom values (all fields changed)",
    ModuleStatus.INCOMPLETE: "Custom values (some fields unchanged)",
}


def _diff_status(current: Dict[str, Any], defaults: Dict[str, Any]) -> ModuleStatus:
    changed = [key for key in defaults if current.get(key) != defaults[key]]
    if not changed:
        return ModuleStatus.DEFAULT
    return ModuleStatus.COMPLETE if len(changed) == len(defaults) else ModuleStatus.INCOMPLETE


def _field_values(filters: BaseModel) -> Dict[str, Any]:
    return {name: getattr(filters, name) for name in type(filters).model_fields}


def module_status(criteria: Criteria, module: ModuleName) -> ModuleStatus:
    module_criteria = criteria.modules.get(module)
    if not module_criteria.enabled:
        return ModuleStatus.DISABLED
    filters = module_criteria.filters
    defaults = _field_values(type(filters)())
    return _diff_status(_field_values(filters), defaults)


def weights_status(criteria: Criteria) -> ModuleStatus:
    return _diff_status(criteria.weights.as_dict(), DEFAULT_WEIGHTS)


def all_statuses(criteria: Criteria) -> Dict[str, Dict[str, str]]:
    """Status and label for the weights tab and every module tab."""
    statuses = {"weights": weights_status(criteria)}
    for module in ModuleName:
        statuses[module.value] = module_status(criteria, module)
    return {
        tab: {"status": status.value, "label": STATUS_LABEL[status]}
        for tab, status in statuses.items()
    }
