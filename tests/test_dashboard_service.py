from app.services.dashboard_service import filter_by_type, select_top_priority, summarize
from conftest import make_report


def test_empty_collection_gives_explicit_empty_selection():
    selection = select_top_priority([])
    assert selection.empty is True
    assert selection.top is None
    assert selection.others == []


def test_top_is_most_urgent_and_others_keep_priority_order():
    reports = [
        make_report(1, "garbage", "Medium"),
        make_report(2, "hazardous", "Critical"),
        make_report(3, "animal-death", "High"),
        make_report(4, "cleaning", "Medium"),
    ]
    selection = select_top_priority(reports)
    assert selection.empty is False
    assert selection.top.id == 2
    assert [r.id for r in selection.others] == [3, 1, 4]


def test_single_report_has_no_others():
    selection = select_top_priority([make_report(1)])
    assert selection.top.id == 1
    assert selection.others == []


def test_selection_does_not_touch_input():
    reports = [make_report(1, "garbage"), make_report(2, "hazardous")]
    select_top_priority(reports)
    assert [r.id for r in reports] == [1, 2]


def test_type_filter():
    reports = [make_report(1, "garbage"), make_report(2, "hazardous"), make_report(3, "garbage")]
    assert [r.id for r in filter_by_type(reports, "garbage")] == [1, 3]
    assert len(filter_by_type(reports, "all")) == 3
    assert len(filter_by_type(reports, None)) == 3

    selection = select_top_priority(reports, report_type="animal-adopt")
    assert selection.empty is True


def test_summary_counts():
    reports = [
        make_report(1, "garbage", status="Pending"),
        make_report(2, "hazardous", status="Resolved"),
        make_report(3, "garbage", status="Pending"),
    ]
    summary = summarize(reports)
    assert summary.total == 3
    assert summary.by_type == {"garbage": 2, "hazardous": 1}
    assert summary.by_status == {"Pending": 2, "Resolved": 1}
    assert summary.by_priority == {"Medium": 2, "Critical": 1}
