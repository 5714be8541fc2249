"""
Data Contracts for the Matching Engine

Defines Pydantic models for Criteria (input), UniversityRecord (catalog rows)
and MatchResult / MatchOutput (output). These contracts are the API boundary
for the matching engine.

Criteria parsing is permissive: anything recoverable is coerced or defaulted
and reported through the validation context instead of failing the request.
"""

import math
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union, get_args, get_origin

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .constants import (
    ANY_SENTINELS,
    COUNTRY_CODE_MAP,
    DEFAULT_WEIGHT,
    WEIGHT_COLUMNS,
    Dimension,
    ModuleName,
)
from .errors import InvalidCriteria


# =============================================================================
# COERCION HELPERS
# =============================================================================

def _warn(info: Optional[ValidationInfo], message: str) -> None:
    context = info.context if info is not None else None
    if isinstance(context, dict) and isinstance(context.get("warnings"), list):
        context["warnings"].append(message)


def to_number(value: Any) -> Optional[float]:
    """Parse a number, returning None for anything unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(",", "").lstrip("$").rstrip("%")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def to_text_list(value: Any) -> List[str]:
    """Accept lists, comma separated strings or scalars."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = list(value)
    else:
        items = [value]
    result: List[str] = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text and text not in result:
            result.append(text)
    return result


def to_flag(value: Any) -> Optional[bool]:
    """Tri-state boolean: None means unknown."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "yes", "y", "1"):
            return True
        if text in ("false", "no", "n", "0"):
            return False
    return None


def country_name(code_or_name: Any) -> Any:
    """Convert country code to full name."""
    if not code_or_name or not isinstance(code_or_name, str):
        return code_or_name
    return COUNTRY_CODE_MAP.get(code_or_name.strip().upper(), code_or_name)


def _field_kind(annotation: Any) -> str:
    origin = get_origin(annotation)
    if origin in (list, List):
        return "list"
    args = get_args(annotation) if origin is Union else (annotation,)
    if float in args or int in args:
        return "number"
    if bool in args:
        return "flag" if type(None) in args else "bool"
    return "text"


# =============================================================================
# INPUT CONTRACTS: FILTERS
# =============================================================================

class FilterSet(BaseModel):
    """
    Base for the per-module filter structs.

    Field names are snake_case; the camelCase names the dashboard sends are
    accepted too, plus a few legacy spellings listed in ``EXTRA_ALIASES``.
    Unknown keys are dropped with a warning.
    """
    EXTRA_ALIASES: ClassVar[Dict[str, str]] = {}

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def _map_aliases(cls, data: Any, info: ValidationInfo) -> Any:
        if isinstance(data, BaseModel):
            return data
        if data is None:
            return {}
        if not isinstance(data, dict):
            _warn(info, f"Ignored non-object filters for {cls.module_label()}")
            return {}
        known = set()
        for name in cls.model_fields:
            known.update((name, to_camel(name)))
        mapped: Dict[str, Any] = {}
        for key, value in data.items():
            if key in cls.EXTRA_ALIASES:
                target = cls.EXTRA_ALIASES[key]
                mapped.setdefault(target, value)
            elif key in known:
                mapped[key] = value
            else:
                _warn(info, f"Ignored unknown {cls.module_label()} filter '{key}'")
        return mapped

    @field_validator("*", mode="before")
    @classmethod
    def _coerce(cls, value: Any, info: ValidationInfo) -> Any:
        kind = _field_kind(cls.model_fields[info.field_name].annotation)
        if kind == "number":
            number = to_number(value)
            if number is None and value not in (None, ""):
                _warn(info, f"Ignored non-numeric {cls.module_label()} filter '{info.field_name}'")
            return number
        if kind == "list":
            return [v for v in to_text_list(value) if v.lower() not in ANY_SENTINELS]
        if kind == "bool":
            return bool(to_flag(value))
        return value

    @classmethod
    def module_label(cls) -> str:
        return cls.__name__.replace("Filters", "").lower()


class AcademicsFilters(FilterSet):
    EXTRA_ALIASES: ClassVar[Dict[str, str]] = {
        "degreeLevel": "degree_levels",
        "researchLevel": "research_levels",
    }

    min_gpa: Optional[float] = None
    degree_levels: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    research_levels: List[str] = Field(default_factory=list)
    study_abroad: bool = False


class FinancialsFilters(FilterSet):
    EXTRA_ALIASES: ClassVar[Dict[str, str]] = {
        "scholarshipsInternational": "require_scholarships",
    }

    max_budget: Optional[float] = None
    max_cost_of_living: Optional[float] = None
    require_scholarships: bool = False
    need_blind: bool = False


class LifestyleFilters(FilterSet):
    EXTRA_ALIASES: ClassVar[Dict[str, str]] = {
        "country": "countries",
        "city": "cities",
        "campusSetting": "settings",
        "climate": "climates",
    }

    countries: List[str] = Field(default_factory=list)
    cities: List[str] = Field(default_factory=list)
    settings: List[str] = Field(default_factory=list)
    climates: List[str] = Field(default_factory=list)

    @field_validator("countries")
    @classmethod
    def _expand_country_codes(cls, value: List[str]) -> List[str]:
        expanded: List[str] = []
        for country in value:
            name = country_name(country)
            if name.lower() not in {c.lower() for c in expanded}:
                expanded.append(name)
        return expanded


class AdmissionsFilters(FilterSet):
    EXTRA_ALIASES: ClassVar[Dict[str, str]] = {
        "testPolicy": "test_policies",
    }

    max_acceptance_rate: Optional[float] = None
    test_policies: List[str] = Field(default_factory=list)
    min_sat: Optional[float] = None
    max_sat: Optional[float] = None


class DemographicsFilters(FilterSet):
    min_enrollment: Optional[float] = None
    max_enrollment: Optional[float] = None
    min_international_pct: Optional[float] = None
    max_international_pct: Optional[float] = None


class FutureFilters(FilterSet):
    min_visa_months: Optional[float] = None
    min_internship_strength: Optional[float] = None
    min_alumni_strength: Optional[float] = None
    min_graduation_rate: Optional[float] = None
    min_employment_rate: Optional[float] = None


# =============================================================================
# INPUT CONTRACTS: MODULES, WEIGHTS, CRITERIA
# =============================================================================

class ModuleCriteria(BaseModel):
    """A toggleable module: disabled modules are fully inert."""
    enabled: bool = True
    filters: FilterSet = Field(default_factory=FilterSet)

    @field_validator("enabled", mode="before")
    @classmethod
    def _coerce_enabled(cls, value: Any) -> bool:
        flag = to_flag(value)
        return True if flag is None else flag


class AcademicsModule(ModuleCriteria):
    filters: AcademicsFilters = Field(default_factory=AcademicsFilters)


class FinancialsModule(ModuleCriteria):
    filters: FinancialsFilters = Field(default_factory=FinancialsFilters)


class LifestyleModule(ModuleCriteria):
    filters: LifestyleFilters = Field(default_factory=LifestyleFilters)


class AdmissionsModule(ModuleCriteria):
    filters: AdmissionsFilters = Field(default_factory=AdmissionsFilters)


class DemographicsModule(ModuleCriteria):
    filters: DemographicsFilters = Field(default_factory=DemographicsFilters)


class FutureModule(ModuleCriteria):
    filters: FutureFilters = Field(default_factory=FutureFilters)


class ModulesCriteria(BaseModel):
    academics: AcademicsModule = Field(default_factory=AcademicsModule)
    financials: FinancialsModule = Field(default_factory=FinancialsModule)
    lifestyle: LifestyleModule = Field(default_factory=LifestyleModule)
    admissions: AdmissionsModule = Field(default_factory=AdmissionsModule)
    demographics: DemographicsModule = Field(default_factory=DemographicsModule)
    future: FutureModule = Field(default_factory=FutureModule)

    @model_validator(mode="before")
    @classmethod
    def _drop_unknown_modules(cls, data: Any, info: ValidationInfo) -> Any:
        if isinstance(data, BaseModel):
            return data
        if data is None:
            return {}
        if not isinstance(data, dict):
            _warn(info, "Ignored non-object modules")
            return {}
        known = {m.value for m in ModuleName}
        cleaned = {}
        for name, value in data.items():
            if name not in known:
                _warn(info, f"Ignored unknown module '{name}'")
            elif not isinstance(value, dict):
                _warn(info, f"Ignored malformed module '{name}'")
            else:
                cleaned[name] = value
        return cleaned

    def get(self, module: ModuleName) -> ModuleCriteria:
        return getattr(self, ModuleName(module).value)

    def enabled_modules(self) -> List[ModuleName]:
        return [m for m in ModuleName if self.get(m).enabled]


class Weights(BaseModel):
    """Relative importance per dimension, each independently in [0, 1]."""
    tuition: float = DEFAULT_WEIGHT
    location: float = DEFAULT_WEIGHT
    ranking: float = DEFAULT_WEIGHT
    program: float = DEFAULT_WEIGHT
    language: float = DEFAULT_WEIGHT

    class Config:
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def _accept_columns(cls, data: Any, info: ValidationInfo) -> Any:
        if isinstance(data, BaseModel):
            return data
        if data is None:
            return {}
        if not isinstance(data, dict):
            _warn(info, "Ignored non-object weights")
            return {}
        mapped = {}
        for key, value in data.items():
            name = WEIGHT_COLUMNS.get(key, key)
            if name in cls.model_fields:
                mapped[name] = value
            else:
                _warn(info, f"Ignored unknown weight '{key}'")
        return mapped

    @field_validator("*", mode="before")
    @classmethod
    def _clamp(cls, value: Any, info: ValidationInfo) -> float:
        number = to_number(value)
        if number is None:
            _warn(info, f"Weight '{info.field_name}' is not a number; using {DEFAULT_WEIGHT}")
            return DEFAULT_WEIGHT
        if number < 0.0 or number > 1.0:
            clamped = min(1.0, max(0.0, number))
            _warn(info, f"Weight '{info.field_name}' clamped from {number:g} to {clamped:g}")
            return clamped
        return number

    def get(self, dimension: Dimension) -> float:
        return getattr(self, Dimension(dimension).value)

    def as_dict(self) -> Dict[str, float]:
        return {d.value: self.get(d) for d in Dimension}


# Legacy flat fields of the simple matching form -> (module, filter key)
LEGACY_FIELDS: Dict[str, Tuple[str, str]] = {
    "minGpa": ("academics", "minGpa"),
    "maxBudget": ("financials", "maxBudget"),
    "country": ("lifestyle", "country"),
}


class Criteria(BaseModel):
    """
    Input contract for the matching engine.
    Represents one student's matching preferences.
    """
    modules: ModulesCriteria = Field(default_factory=ModulesCriteria)
    interests: List[str] = Field(default_factory=list)
    weights: Weights = Field(default_factory=Weights)

    @model_validator(mode="before")
    @classmethod
    def _gather(cls, data: Any) -> Any:
        """Accept modules and weights at the top level as the dashboard sends them."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        modules = data.get("modules")
        if modules is None:
            modules = {}
        if isinstance(modules, dict):
            modules = dict(modules)
            for module in ModuleName:
                if module.value in data and module.value not in modules:
                    modules[module.value] = data.pop(module.value)
            for key, (module, filter_key) in LEGACY_FIELDS.items():
                value = data.pop(key, None)
                if value in (None, "") or (isinstance(value, str) and value.lower() in ANY_SENTINELS):
                    continue
                target = modules.get(module, {"enabled": True})
                if not isinstance(target, dict) or not isinstance(target.get("filters", {}), dict):
                    continue
                filters = dict(target.get("filters") or {})
                filters.setdefault(filter_key, value)
                modules[module] = {**target, "filters": filters}
            data["modules"] = modules
        if "weights" not in data:
            flat = {k: data.pop(k) for k in list(data) if k in WEIGHT_COLUMNS}
            if flat:
                data["weights"] = flat
        return data

    @field_validator("interests", mode="before")
    @classmethod
    def _ordered_interests(cls, value: Any) -> List[str]:
        seen = set()
        result = []
        for item in to_text_list(value):
            key = item.lower()
            if key not in seen:
                seen.add(key)
                result.append(item)
        return result

    @classmethod
    def parse(cls, payload: Any) -> Tuple["Criteria", List[str]]:
        """
        Build Criteria from an untrusted payload.

        Returns the criteria and the list of corrections applied. Raises
        InvalidCriteria only when the payload is not an object at all.
        """
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise InvalidCriteria("Criteria must be a JSON object")
        warnings: List[str] = []
        try:
            criteria = cls.model_validate(payload, context={"warnings": warnings})
        except ValidationError as e:
            raise InvalidCriteria(f"Invalid criteria: {e}") from e
        return criteria, warnings

    def with_weights(self, weights: Dict[str, float]) -> "Criteria":
        return self.model_copy(update={"weights": Weights(**weights)})

    def with_persisted_weights(self, persisted: Dict[str, float]) -> "Criteria":
        """Persisted weights underneath; weights this request stated explicitly win."""
        explicit = {name: getattr(self.weights, name) for name in self.weights.model_fields_set}
        return self.with_weights({**persisted, **explicit})


# =============================================================================
# CATALOG CONTRACT
# =============================================================================

class UniversityRecord(BaseModel):
    """
    A read-only catalog row as the engine sees it.

    Every attribute except ``id`` may be absent. Values that cannot be
    interpreted are treated as absent instead of raising.
    """
    # Identity
    id: str
    slug: Optional[str] = None
    name: str = ""

    # Display
    description: Optional[str] = None
    image_url: Optional[str] = None
    ranking_world: Optional[float] = None
    interests: List[str] = Field(default_factory=list)

    # Academics
    degree_levels_offered: List[str] = Field(default_factory=list)
    languages_of_instruction: List[str] = Field(default_factory=list)
    research_activity_level: Optional[str] = None
    top_ranked_programs: List[str] = Field(default_factory=list)
    study_abroad_opportunities: Optional[bool] = None

    # Financials
    tuition_international: Optional[float] = None
    avg_tuition_per_year: Optional[float] = None
    cost_of_living_est: Optional[float] = None
    scholarships_international: Optional[bool] = None
    need_blind_admission: Optional[bool] = None

    # Lifestyle
    location_country: Optional[str] = None
    location_city: Optional[str] = None
    campus_setting: Optional[str] = None
    climate_zone: Optional[str] = None

    # Admissions
    acceptance_rate: Optional[float] = None
    standardized_test_policy: Optional[str] = None
    sat_score_25th_percentile: Optional[float] = None
    sat_score_75th_percentile: Optional[float] = None
    min_gpa_requirement: Optional[float] = None

    # Demographics
    total_enrollment: Optional[float] = None
    percentage_international: Optional[float] = None

    # Future outcomes
    post_study_work_visa_months: Optional[float] = None
    internship_placement_support: Optional[float] = None
    alumni_network_strength: Optional[float] = None
    graduation_rate_6yr: Optional[float] = None
    employment_rate_6mo: Optional[float] = None

    class Config:
        extra = "ignore"

    @field_validator("*", mode="before")
    @classmethod
    def _tolerant(cls, value: Any, info: ValidationInfo) -> Any:
        if info.field_name == "id":
            return None if value is None else str(value)
        kind = _field_kind(cls.model_fields[info.field_name].annotation)
        if kind == "number":
            return to_number(value)
        if kind == "list":
            return to_text_list(value)
        if kind == "flag":
            return to_flag(value)
        if value is None:
            return "" if info.field_name == "name" else None
        text = str(value).strip()
        if info.field_name == "location_country":
            text = country_name(text)
        return text or ("" if info.field_name == "name" else None)

    @property
    def tuition(self) -> Optional[float]:
        if self.tuition_international is not None:
            return self.tuition_international
        return self.avg_tuition_per_year


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class ConstraintCheck(BaseModel):
    """Outcome of one configured hard filter against one university."""
    module: str
    field: str
    reason: str
    actual: Any = None
    threshold: Any = None


class FilterResult(BaseModel):
    eligible: bool = True
    violations: List[ConstraintCheck] = Field(default_factory=list)
    satisfied: List[ConstraintCheck] = Field(default_factory=list)


class DimensionFit(BaseModel):
    """Per-dimension fit with the weight it carried."""
    dimension: str
    fit: float = Field(ge=0.0, le=1.0)
    weight: float = Field(ge=0.0, le=1.0)
    detail: str = ""


class MatchResult(BaseModel):
    """One university's outcome for one match request."""
    university_id: str
    score: float = Field(ge=0.0, le=1.0)
    eligible: bool
    explanations: List[str] = Field(default_factory=list)
    violations: List[ConstraintCheck] = Field(default_factory=list)
    fits: List[DimensionFit] = Field(default_factory=list)
    university: UniversityRecord

    @property
    def percentage(self) -> int:
        return int(round(self.score * 100))


class MatchOutput(BaseModel):
    """
    Output contract for the matching engine.
    Contains ranked results with summary statistics.
    """
    request_id: Optional[str] = None
    results: List[MatchResult] = Field(default_factory=list)

    total_candidates_evaluated: int = 0
    total_eligible: int = 0
    total_returned: int = 0

    processing_time_ms: Optional[float] = None
    engine_version: str = "1.0.0"

    warnings: List[str] = Field(default_factory=list)
