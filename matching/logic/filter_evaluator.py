"""
Filter Evaluator

Decides per enabled module whether a university is admissible under the
module's configured constraints. Never raises on data shape.

Absence of data never causes failure: a university missing the attribute a
filter looks at passes that filter, so sparsely documented universities can
still surface.
"""

from typing import Any, List, Optional

from .contracts import ConstraintCheck, Criteria, FilterResult, UniversityRecord
from .constants import ModuleName
from .filter_rules import FilterRule, RuleKind, rules_for


def university_value(university: UniversityRecord, rule: FilterRule) -> Any:
    """First present attribute for the rule, or None."""
    for attribute in rule.attributes:
        value = getattr(university, attribute, None)
        if value is None:
            continue
        if isinstance(value, (list, str)) and not value:
            continue
        return value
    return None


def is_configured(rule: FilterRule, value: Any) -> bool:
    """Whether a filter value actually constrains anything."""
    if rule.kind == RuleKind.REQUIRE:
        return value is True
    if rule.kind == RuleKind.ANY_OF:
        return bool(value)
    return value is not None


def _as_set(value: Any) -> set:
    if isinstance(value, (list, tuple, set)):
        return {str(v).strip().lower() for v in value if str(v).strip()}
    return {str(value).strip().lower()}


def check_rule(rule: FilterRule, configured: Any, actual: Any) -> Optional[ConstraintCheck]:
    """
    Evaluate one configured rule against a present university value.

    Returns a violation, or None when the rule passes.
    """
    if rule.kind == RuleKind.MIN:
        if actual < configured:
            return ConstraintCheck(
                module=rule.module.value, field=rule.field,
                reason="below minimum", actual=actual, threshold=configured,
            )
    elif rule.kind == RuleKind.MAX:
        if actual > configured:
            return ConstraintCheck(
                module=rule.module.value, field=rule.field,
                reason="above maximum", actual=actual, threshold=configured,
            )
    elif rule.kind == RuleKind.ANY_OF:
        if not (_as_set(configured) & _as_set(actual)):
            return ConstraintCheck(
                module=rule.module.value, field=rule.field,
                reason="not in preferred set", actual=actual, threshold=list(configured),
            )
    elif rule.kind == RuleKind.REQUIRE:
        if not actual:
            return ConstraintCheck(
                module=rule.module.value, field=rule.field,
                reason="required but not offered", actual=actual, threshold=True,
            )
    return None


def evaluate(university: UniversityRecord, criteria: Criteria) -> FilterResult:
    """
    Evaluate every enabled module's constraints against one university.

    Args:
        university: Catalog record
        criteria: Normalized criteria

    Returns:
        FilterResult with eligibility, violations and satisfied constraints
    """
    violations: List[ConstraintCheck] = []
    satisfied: List[ConstraintCheck] = []

    for module in ModuleName:
        module_criteria = criteria.modules.get(module)
        if not module_criteria.enabled:
            continue
        filters = module_criteria.filters
        for rule in rules_for(module):
            configured = getattr(filters, rule.field, None)
            if not is_configured(rule, configured):
                continue
            actual = university_value(university, rule)
            if actual is None:
                continue
            violation = check_rule(rule, configured, actual)
            if violation is not None:
                violations.append(violation)
            else:
                satisfied.append(ConstraintCheck(
                    module=module.value, field=rule.field,
                    reason="satisfied", actual=actual, threshold=configured,
                ))

    return FilterResult(
        eligible=not violations,
        violations=violations,
        satisfied=satisfied,
    )
