"""
Builders for criteria and catalog records used across the matching tests.
"""

from matching.logic import Criteria, UniversityRecord
from matching.logic.constants import ModuleName


def make_university(id="u1", name=None, **attrs) -> UniversityRecord:
    return UniversityRecord(id=id, name=name if name is not None else f"University {id}", **attrs)


def make_criteria(payload=None) -> Criteria:
    criteria, _ = Criteria.parse(payload or {})
    return criteria


def all_disabled(**overrides) -> dict:
    """Modules payload with every module switched off."""
    modules = {m.value: {"enabled": False} for m in ModuleName}
    modules.update(overrides)
    return {"modules": modules}
