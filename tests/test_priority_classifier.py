import pytest

from app.core.settings import settings
from app.models.report import Priority, ReportType
from app.services.priority_classifier import (
    ReportClassifier,
    get_report_classifier,
    reset_report_classifier,
)
from conftest import make_report


@pytest.fixture
def classifier():
    return ReportClassifier()


@pytest.mark.parametrize("report_type, expected", [
    ("hazardous", "Critical"),
    ("animal-death", "High"),
    ("animal-care", "High"),
    ("animal-adopt", "High"),
    ("garbage", "Medium"),
    ("cleaning", "Medium"),
    ("recycling", "Medium"),
    ("other", "Medium"),
])
def test_classify_known_types(classifier, report_type, expected):
    assert classifier.classify(report_type).value == expected


@pytest.mark.parametrize("report_type", ["unknown-value", "", None, "HAZARDOUS", 42])
def test_classify_unknown_types_fall_back_to_medium(classifier, report_type):
    assert classifier.classify(report_type) == Priority.MEDIUM


def test_classify_accepts_enum_members(classifier):
    assert classifier.classify(ReportType.HAZARDOUS) == Priority.CRITICAL


def test_every_type_maps_to_a_priority(classifier):
    for report_type in ReportType:
        assert classifier.classify(report_type.value) in set(Priority)


def test_rank_order_is_total_and_transitive(classifier):
    labels = ["Critical", "High", "Medium", "Low"]
    ranks = [classifier.rank(label) for label in labels]
    assert ranks == sorted(ranks)
    assert len(set(ranks)) == 4
    for a in labels:
        for b in labels:
            for c in labels:
                if classifier.rank(a) < classifier.rank(b) < classifier.rank(c):
                    assert classifier.rank(a) < classifier.rank(c)


def test_stored_priority_wins_over_type(classifier):
    report = make_report(1, report_type="hazardous", priority="Low")
    assert classifier.effective_priority(report) == Priority.LOW


def test_missing_or_unknown_stored_priority_derives_from_type(classifier):
    assert classifier.effective_priority(make_report(1, "animal-death", priority=None)) == Priority.HIGH
    assert classifier.effective_priority(make_report(2, "hazardous", priority="Urgent!")) == Priority.CRITICAL


def test_sort_example_orders_hazardous_first(classifier):
    reports = [
        make_report(1, "garbage", "Medium"),
        make_report(2, "hazardous", "Critical"),
        make_report(3, "animal-death", "High"),
    ]
    ordered = classifier.sort_reports(reports)
    assert [r.type for r in ordered] == ["hazardous", "animal-death", "garbage"]
    # Input untouched
    assert [r.id for r in reports] == [1, 2, 3]


def test_sort_is_stable_for_equal_priorities(classifier):
    reports = [
        make_report(10, "garbage"),
        make_report(11, "hazardous"),
        make_report(12, "cleaning"),
        make_report(13, "recycling"),
        make_report(14, "other"),
    ]
    ordered = classifier.sort_reports(reports)
    assert [r.id for r in ordered] == [11, 10, 12, 13, 14]


def test_compare_sign(classifier):
    critical = make_report(1, "hazardous")
    medium = make_report(2, "garbage")
    assert classifier.compare(critical, medium) < 0
    assert classifier.compare(medium, critical) > 0
    assert classifier.compare(medium, make_report(3, "other")) == 0


def test_overrides_replace_table_entries():
    classifier = ReportClassifier(overrides={"animal-adopt": "Low", "bulky-waste": "High"})
    assert classifier.classify("animal-adopt") == Priority.LOW
    assert classifier.classify("bulky-waste") == Priority.HIGH
    assert classifier.classify("hazardous") == Priority.CRITICAL


def test_invalid_override_is_rejected():
    with pytest.raises(ValueError):
        ReportClassifier(overrides={"animal-adopt": "Whenever"})


def test_singleton_reads_overrides_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "PRIORITY_OVERRIDES", {"animal-adopt": "Low"})
    reset_report_classifier()
    assert get_report_classifier().classify("animal-adopt") == Priority.LOW
    assert get_report_classifier() is get_report_classifier()
