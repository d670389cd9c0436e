"""End-to-end underwriting of travel insurance applications.

The concrete rules here stand in for the business rules an application
would supply; they exercise the engine the way a real rule set does.
"""

from dataclasses import dataclass, replace
from datetime import date

import pytest

from uwe.application.config_models import EngineConfig
from uwe.application.rule_set import RuleSet
from uwe.application.underwriting_engine import UnderwritingEngine
from uwe.domain.events.emitter import UnderwritingEventEmitter
from uwe.domain.events.stderr_observer import StderrEventObserver
from uwe.domain.models.validation_result import ValidationResult
from uwe.domain.validation.validation_context import ValidationContext
from uwe.domain.validation.validation_rule import ValidationRule

SUPPORTED_COUNTRIES = {"LV", "EE", "LT", "ES", "DE"}


@dataclass(frozen=True)
class TravelApplication:
    first_name: str | None
    last_name: str | None
    birth_date: date | None
    country: str
    date_from: date
    date_to: date
    risks: tuple[str, ...] = ("TRAVEL_MEDICAL",)
    medical_limit_level: str | None = "LEVEL_10000"


class NotBlankRule(ValidationRule[TravelApplication]):
    def __init__(self, field: str) -> None:
        self._field = field

    def evaluate(self, target, context):
        value = getattr(target, self._field)
        if value is None or (isinstance(value, str) and not value.strip()):
            return ValidationResult.failure(f"Field {self._field} must not be empty")
        return ValidationResult.success()

    @property
    def name(self) -> str:
        return f"NotBlank.{self._field}"

    @property
    def order(self) -> int:
        return 10

    @property
    def critical(self) -> bool:
        return True


class CountryRule(ValidationRule[TravelApplication]):
    order = 200
    critical = True

    def evaluate(self, target, context):
        if target.country not in SUPPORTED_COUNTRIES:
            return ValidationResult.failure(f"Country {target.country} is not covered")
        return ValidationResult.success()


class AgeRule(ValidationRule[TravelApplication]):
    """Publishes the computed age so later rules can reuse it."""

    order = 110

    def evaluate(self, target, context):
        born = target.birth_date
        today = context.validation_date
        age = today.year - born.year - ((today.month, today.day) < (born.month, born.day))
        context.set_attribute("age", age)
        if age >= 75:
            return ValidationResult.failure(f"Age {age} requires manual review (threshold: 75)")
        return ValidationResult.success()


class TripDurationRule(ValidationRule[TravelApplication]):
    order = 120
    concurrent_safe = True

    def evaluate(self, target, context):
        days = (target.date_to - target.date_from).days
        if days > 180:
            return ValidationResult.failure(f"Trip duration {days} days exceeds 180")
        return ValidationResult.success()


class MedicalLimitLevelRule(ValidationRule[TravelApplication]):
    order = 130
    concurrent_safe = True

    def evaluate(self, target, context):
        if not target.medical_limit_level:
            return ValidationResult.failure("Medical risk limit level must be provided")
        return ValidationResult.success()


def _rule_set() -> RuleSet:
    return (
        RuleSet()
        .add(CountryRule())
        .add(TripDurationRule())
        .add(AgeRule())
        .add_when(lambda app: "TRAVEL_MEDICAL" in app.risks, MedicalLimitLevelRule())
        .add_all(NotBlankRule(f) for f in ("first_name", "last_name", "birth_date"))
    )


@pytest.fixture
def application() -> TravelApplication:
    return TravelApplication(
        first_name="Anna",
        last_name="Berzina",
        birth_date=date(1990, 5, 17),
        country="LV",
        date_from=date(2026, 6, 1),
        date_to=date(2026, 6, 14),
    )


@pytest.fixture(params=[1, 3], ids=["sequential", "concurrent"])
def engine(request) -> UnderwritingEngine:
    return UnderwritingEngine(EngineConfig(max_workers=request.param))


def _ctx() -> ValidationContext:
    return ValidationContext(validation_date=date(2026, 3, 1))


def test_rule_set_order(application) -> None:
    assert _rule_set().names() == [
        "NotBlank.first_name",
        "NotBlank.last_name",
        "NotBlank.birth_date",
        "AgeRule",
        "TripDurationRule",
        "Conditional[MedicalLimitLevelRule]",
        "CountryRule",
    ]


def test_clean_application_approved(engine, application) -> None:
    result = engine.evaluate(application, _ctx(), _rule_set())

    assert result.is_approved is True
    assert len(result.rule_results) == 7
    assert all(r.passed for r in result.rule_results)


def test_elderly_traveller_requires_review(engine, application) -> None:
    context = _ctx()
    result = engine.evaluate(replace(application, birth_date=date(1950, 1, 1)), context, _rule_set())

    assert result.requires_manual_review is True
    assert result.decline_reason == "Age 76 requires manual review (threshold: 75)"
    assert context.get_attribute("age", int) == 76


def test_review_reasons_are_combined(engine, application) -> None:
    app = replace(
        application,
        birth_date=date(1950, 1, 1),
        date_to=date(2027, 1, 1),
        medical_limit_level=None,
    )

    result = engine.evaluate(app, _ctx(), _rule_set())

    assert result.requires_manual_review is True
    assert result.decline_reason == (
        "Age 76 requires manual review (threshold: 75); "
        "Trip duration 214 days exceeds 180; "
        "Medical risk limit level must be provided"
    )


def test_medical_limit_not_checked_without_medical_risk(engine, application) -> None:
    app = replace(application, risks=("TRIP_CANCELLATION",), medical_limit_level=None)
    assert engine.evaluate(app, _ctx(), _rule_set()).is_approved is True


def test_missing_name_declines_before_later_rules(engine, application) -> None:
    result = engine.evaluate(replace(application, first_name="  "), _ctx(), _rule_set())

    assert result.is_declined is True
    assert result.decline_reason == "Field first_name must not be empty"
    assert [r.name for r in result.rule_results] == ["NotBlank.first_name"]


def test_missing_birth_date_stops_before_age_rule(engine, application) -> None:
    result = engine.evaluate(replace(application, birth_date=None), _ctx(), _rule_set())

    assert result.is_declined is True
    assert result.rule_results[-1].name == "NotBlank.birth_date"


def test_uncovered_country_declines_after_review_findings(engine, application) -> None:
    app = replace(application, country="XX", birth_date=date(1950, 1, 1))

    result = engine.evaluate(app, _ctx(), _rule_set())

    assert result.is_declined is True
    assert result.decline_reason == "Country XX is not covered"
    assert len(result.failed_rules) == 2


def test_same_application_same_result(engine, application) -> None:
    app = replace(application, birth_date=date(1950, 1, 1))
    assert engine.evaluate(app, _ctx(), _rule_set()) == engine.evaluate(app, _ctx(), _rule_set())


def test_stderr_observer_reports_run(application, capsys) -> None:
    emitter = UnderwritingEventEmitter()
    emitter.subscribe(StderrEventObserver())

    UnderwritingEngine(event_emitter=emitter).evaluate(
        replace(application, country="XX"), _ctx(), _rule_set()
    )

    lines = capsys.readouterr().err.strip().splitlines()
    assert len({line.split("]")[0] for line in lines}) == 1
    assert lines[0].endswith("evaluation_started rules=7")
    assert lines[-2].endswith("evaluation_halted CountryRule skipped=0")
    assert lines[-1].endswith("decision_made DECLINED: Country XX is not covered")


def test_engine_without_observers_emits_nothing(application, capsys) -> None:
    emitter = UnderwritingEventEmitter()
    observer = StderrEventObserver()
    emitter.subscribe(observer)
    emitter.unsubscribe(observer)

    UnderwritingEngine(event_emitter=emitter).evaluate(application, _ctx(), _rule_set())

    assert capsys.readouterr().err == ""
