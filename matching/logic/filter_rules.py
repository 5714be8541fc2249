"""
Filter Rules

Declarative table of hard constraints per module. The evaluator walks this
table generically, so adding a filter is a matter of adding a typed field to
the module's filter struct and one FilterRule here.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .constants import ModuleName


class RuleKind(str, Enum):
    MIN = "min"            # university value must be >= configured value
    MAX = "max"            # university value must be <= configured value
    ANY_OF = "any_of"      # configured set must intersect university value(s)
    REQUIRE = "require"    # when configured true, university flag must be truthy


class ValueFormat(str, Enum):
    MONEY = "money"
    PERCENT = "percent"
    MONTHS = "months"
    SCALE = "scale"
    COUNT = "count"
    DECIMAL = "decimal"
    TEXT = "text"


@dataclass(frozen=True)
class FilterRule:
    module: ModuleName
    field: str                       # attribute on the module's filter struct
    attributes: Tuple[str, ...]      # university attributes, first present wins
    kind: RuleKind
    label: str                       # noun phrase used in explanations
    fmt: ValueFormat = ValueFormat.TEXT
    pass_template: Optional[str] = None

    @property
    def attribute(self) -> str:
        return self.attributes[0]


def _rule(module, field, attributes, kind, label, fmt=ValueFormat.TEXT, pass_template=None) -> FilterRule:
    if isinstance(attributes, str):
        attributes = (attributes,)
    return FilterRule(module, field, tuple(attributes), kind, label, fmt, pass_template)


M = ModuleName
K = RuleKind
F = ValueFormat

MODULE_RULES: Dict[ModuleName, List[FilterRule]] = {
    M.ACADEMICS: [
        _rule(M.ACADEMICS, "min_gpa", "min_gpa_requirement", K.MIN, "GPA requirement", F.DECIMAL),
        _rule(M.ACADEMICS, "degree_levels", "degree_levels_offered", K.ANY_OF, "Degree levels",
              pass_template="Offers {actual}"),
        _rule(M.ACADEMICS, "languages", "languages_of_instruction", K.ANY_OF, "Languages of instruction",
              pass_template="Teaches in {actual}"),
        _rule(M.ACADEMICS, "research_levels", "research_activity_level", K.ANY_OF, "Research activity"),
        _rule(M.ACADEMICS, "study_abroad", "study_abroad_opportunities", K.REQUIRE, "Study abroad opportunities",
              pass_template="Study abroad opportunities available"),
    ],
    M.FINANCIALS: [
        _rule(M.FINANCIALS, "max_budget", ("tuition_international", "avg_tuition_per_year"), K.MAX,
              "Tuition", F.MONEY, pass_template="Within budget ({actual}/yr)"),
        _rule(M.FINANCIALS, "max_cost_of_living", "cost_of_living_est", K.MAX, "Cost of living", F.MONEY,
              pass_template="Cost of living within limit ({actual}/yr)"),
        _rule(M.FINANCIALS, "require_scholarships", "scholarships_international", K.REQUIRE,
              "Scholarships for international students",
              pass_template="Scholarships for international students"),
        _rule(M.FINANCIALS, "need_blind", "need_blind_admission", K.REQUIRE, "Need-blind admission",
              pass_template="Need-blind admission"),
    ],
    M.LIFESTYLE: [
        _rule(M.LIFESTYLE, "countries", "location_country", K.ANY_OF, "Country",
              pass_template="Located in {actual}"),
        _rule(M.LIFESTYLE, "cities", "location_city", K.ANY_OF, "City"),
        _rule(M.LIFESTYLE, "settings", "campus_setting", K.ANY_OF, "Campus setting",
              pass_template="{actual} campus"),
        _rule(M.LIFESTYLE, "climates", "climate_zone", K.ANY_OF, "Climate"),
    ],
    M.ADMISSIONS: [
        _rule(M.ADMISSIONS, "max_acceptance_rate", "acceptance_rate", K.MAX, "Acceptance rate", F.PERCENT),
        _rule(M.ADMISSIONS, "test_policies", "standardized_test_policy", K.ANY_OF, "Test policy"),
        _rule(M.ADMISSIONS, "min_sat", "sat_score_75th_percentile", K.MIN, "SAT 75th percentile", F.COUNT),
        _rule(M.ADMISSIONS, "max_sat", "sat_score_25th_percentile", K.MAX, "SAT 25th percentile", F.COUNT),
    ],
    M.DEMOGRAPHICS: [
        _rule(M.DEMOGRAPHICS, "min_enrollment", "total_enrollment", K.MIN, "Enrollment", F.COUNT),
        _rule(M.DEMOGRAPHICS, "max_enrollment", "total_enrollment", K.MAX, "Enrollment", F.COUNT),
        _rule(M.DEMOGRAPHICS, "min_international_pct", "percentage_international", K.MIN,
              "International students", F.PERCENT),
        _rule(M.DEMOGRAPHICS, "max_international_pct", "percentage_international", K.MAX,
              "International students", F.PERCENT),
    ],
    M.FUTURE: [
        _rule(M.FUTURE, "min_visa_months", "post_study_work_visa_months", K.MIN, "Post-study work visa",
              F.MONTHS, pass_template="Post-study work visa ({actual})"),
        _rule(M.FUTURE, "min_internship_strength", "internship_placement_support", K.MIN,
              "Internship support", F.SCALE),
        _rule(M.FUTURE, "min_alumni_strength", "alumni_network_strength", K.MIN, "Alumni network", F.SCALE),
        _rule(M.FUTURE, "min_graduation_rate", "graduation_rate_6yr", K.MIN, "6-year graduation rate",
              F.PERCENT),
        _rule(M.FUTURE, "min_employment_rate", "employment_rate_6mo", K.MIN, "Employment rate", F.PERCENT),
    ],
}


def rules_for(module: ModuleName) -> List[FilterRule]:
    return MODULE_RULES.get(ModuleName(module), [])


def find_rule(module: str, field: str) -> Optional[FilterRule]:
    for rule in rules_for(ModuleName(module)):
        if rule.field == field:
            return rule
    return None
