"""
Explanation Builder

Turns filter outcomes and dimension fits into short display lines.

Ordering is fixed: violated constraints first (naming the field with both
the actual and threshold values), then satisfied constraints worth calling
out, then dimension highlights. With nothing to say, a single neutral line.
"""

from typing import Any, Dict, List

from .contracts import ConstraintCheck, Criteria, DimensionFit, FilterResult, UniversityRecord
from .constants import HIGHLIGHT_FIT_THRESHOLD, NEUTRAL_EXPLANATION, Dimension
from .dimension_scorers import matched_interests
from .filter_rules import FilterRule, RuleKind, ValueFormat, find_rule

POSITIVE = "✅"
NEGATIVE = "⚠️"


def format_value(value: Any, fmt: ValueFormat = ValueFormat.TEXT) -> str:
    if value is None:
        return "unknown"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (list, tuple, set)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, (int, float)):
        if fmt == ValueFormat.MONEY:
            return f"${value:,.0f}"
        if fmt == ValueFormat.PERCENT:
            return f"{value:g}%"
        if fmt == ValueFormat.MONTHS:
            return f"{value:g} months"
        if fmt == ValueFormat.SCALE:
            return f"{value:g}/5"
        if fmt == ValueFormat.COUNT:
            return f"{value:,.0f}"
        return f"{value:g}"
    return str(value)


def describe_violation(rule: FilterRule, check: ConstraintCheck) -> str:
    actual = format_value(check.actual, rule.fmt)
    threshold = format_value(check.threshold, rule.fmt)
    if rule.kind == RuleKind.MIN:
        return f"{NEGATIVE} {rule.label} lower than required ({actual} < {threshold})"
    if rule.kind == RuleKind.MAX:
        return f"{NEGATIVE} {rule.label} higher than preferred ({actual} > {threshold})"
    if rule.kind == RuleKind.ANY_OF:
        return f"{NEGATIVE} {rule.label} not in your preferences ({actual}; wanted {threshold})"
    return f"{NEGATIVE} {rule.label} not offered ({actual}; required)"


def describe_satisfied(rule: FilterRule, check: ConstraintCheck) -> str:
    return f"{POSITIVE} " + rule.pass_template.format(actual=format_value(check.actual, rule.fmt))


def _violation_lines(filter_result: FilterResult) -> List[str]:
    lines = []
    for check in filter_result.violations:
        rule = find_rule(check.module, check.field)
        if rule is None:
            lines.append(f"{NEGATIVE} {check.field} {check.reason}")
        else:
            lines.append(describe_violation(rule, check))
    return lines


def _satisfied_lines(filter_result: FilterResult) -> List[str]:
    lines = []
    for check in filter_result.satisfied:
        rule = find_rule(check.module, check.field)
        if rule is not None and rule.pass_template:
            line = describe_satisfied(rule, check)
            if line not in lines:
                lines.append(line)
    return lines


def _highlight(dimension: str, university: UniversityRecord, criteria: Criteria) -> str:
    if dimension == Dimension.TUITION.value:
        return f"{POSITIVE} Affordable tuition ({format_value(university.tuition, ValueFormat.MONEY)}/yr)"
    if dimension == Dimension.LOCATION.value:
        place = ", ".join(p for p in (university.location_city, university.location_country) if p)
        return f"{POSITIVE} In a preferred location ({place})"
    if dimension == Dimension.RANKING.value:
        parts = []
        if university.post_study_work_visa_months is not None:
            parts.append(f"{format_value(university.post_study_work_visa_months, ValueFormat.MONTHS)} post-study visa")
        if university.acceptance_rate is not None:
            parts.append(f"{format_value(university.acceptance_rate, ValueFormat.PERCENT)} acceptance")
        return f"{POSITIVE} Strong outcomes ({', '.join(parts)})"
    if dimension == Dimension.PROGRAM.value:
        offered = list(university.top_ranked_programs) + list(university.interests)
        matched = matched_interests(criteria.interests, offered)
        return f"{POSITIVE} Strong programs for your interests ({', '.join(matched)})"
    return f"{POSITIVE} Taught in your language ({', '.join(university.languages_of_instruction)})"


def explain(
    university: UniversityRecord,
    criteria: Criteria,
    filter_result: FilterResult,
    fits: Dict[str, DimensionFit]
) -> List[str]:
    """
    Build the ordered explanation lines for one university.

    Args:
        university: Catalog record
        criteria: Normalized criteria
        filter_result: Output of the filter evaluator
        fits: Dimension fits from the scorer

    Returns:
        List of display strings, violations first
    """
    lines = _violation_lines(filter_result)
    lines.extend(_satisfied_lines(filter_result))

    for dimension in Dimension:
        fit = fits.get(dimension.value)
        if fit is not None and fit.fit >= HIGHLIGHT_FIT_THRESHOLD:
            lines.append(_highlight(dimension.value, university, criteria))

    if not lines:
        lines.append(NEUTRAL_EXPLANATION)
    return lines
