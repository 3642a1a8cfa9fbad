import random

import pytest

from conftest import make_record
from la_core_lib.core.progress import ProgressCalculator
from la_core_lib.core.timeline import MAIN_BRANCH_ID, TimelineSynthesizer, placeholder_id
from la_core_lib.models import CaseCategory, MergePoint, ServiceType, TimelineStatus


@pytest.fixture
def synthesize(catalog):
    calculator = ProgressCalculator(catalog)
    synthesizer = TimelineSynthesizer(catalog)

    def _run(records, category=CaseCategory.FAMILY):
        progress = calculator.calculate(category, records).result
        return synthesizer.synthesize(category, records, progress)

    return _run


def test_simple_case_forms_linear_main_branch(synthesize):
    timeline = synthesize([
        make_record("r3", ServiceType.MEDIATION, day=5, status="in_progress"),
        make_record("r1", ServiceType.CONSULTATION, day=0),
        make_record("r2", ServiceType.DOCUMENT_PREPARATION, day=2),
    ])

    main = timeline.main_branch
    assert main.id == MAIN_BRANCH_ID
    assert main.event_ids == ["r1", "r2", "r3"]
    assert [e.dependencies for e in main.events] == [[], ["r1"], ["r2"]]
    assert main.status is TimelineStatus.IN_PROGRESS
    assert main.progress == 64
    assert timeline.parallel_branches == []
    assert timeline.merge_points == []


def test_same_type_events_share_a_parallel_branch(synthesize):
    timeline = synthesize([
        make_record("x2", ServiceType.RESEARCH, day=3),
        make_record("x1", ServiceType.RESEARCH, day=1),
        make_record("r1", ServiceType.CONSULTATION, day=0),
    ])

    assert len(timeline.parallel_branches) == 1
    research = timeline.parallel_branches[0]
    assert research.title == "RESEARCH"
    assert research.id == "research"
    assert research.event_ids == ["x1", "x2"]
    assert research.status is TimelineStatus.COMPLETED
    assert research.progress == 100
    assert timeline.merge_points == []


def test_remaining_required_services_appear_as_pending_placeholders(synthesize):
    timeline = synthesize([
        make_record("r1", ServiceType.CONSULTATION, day=0),
        make_record("x1", ServiceType.RESEARCH, day=3),
    ])

    main = timeline.main_branch
    assert main.event_ids == [
        "r1",
        placeholder_id(ServiceType.DOCUMENT_PREPARATION),
        placeholder_id(ServiceType.MEDIATION),
    ]
    pending = main.events[1]
    assert pending.id == "pending-document-preparation"
    assert pending.status is TimelineStatus.PENDING
    assert pending.dependencies == ["r1"]
    assert pending.date == timeline.parallel_branches[0].events[-1].date
    assert main.status is TimelineStatus.PENDING
    assert main.progress == 27


def test_in_progress_required_service_gets_no_placeholder(synthesize):
    timeline = synthesize([
        make_record("r1", ServiceType.CONSULTATION, day=0),
        make_record("m1", ServiceType.MEDIATION, day=2, status="in_progress"),
    ])

    ids = timeline.main_branch.event_ids
    assert "m1" in ids
    assert placeholder_id(ServiceType.MEDIATION) not in ids
    assert placeholder_id(ServiceType.DOCUMENT_PREPARATION) in ids


def test_converging_work_produces_merge_points(synthesize):
    timeline = synthesize([
        make_record("r1", ServiceType.CONSULTATION, day=0),
        make_record("d1", ServiceType.DOCUMENT_PREPARATION, day=1),
        make_record("x1", ServiceType.RESEARCH, day=2, depends_on=["r1"]),
        make_record("m1", ServiceType.MEDIATION, day=4, depends_on=["d1", "x1"]),
    ])

    assert timeline.main_branch.event_ids == ["r1", "d1", "m1"]
    assert [b.id for b in timeline.parallel_branches] == ["research"]
    assert timeline.merge_points == [
        MergePoint(event_id="x1", branch_ids=["main"]),
        MergePoint(event_id="m1", branch_ids=["main", "research"]),
    ]


def test_dependency_on_own_branch_alone_is_not_a_merge(synthesize):
    timeline = synthesize([
        make_record("r1", ServiceType.CONSULTATION, day=0),
        make_record("x1", ServiceType.RESEARCH, day=1, depends_on=[]),
        make_record("x2", ServiceType.RESEARCH, day=2, depends_on=["x1"]),
    ])

    assert timeline.branch_of("x2").id == "research"
    assert timeline.merge_points == []


def test_merge_point_lists_every_source_branch(synthesize):
    timeline = synthesize([
        make_record("r1", ServiceType.CONSULTATION, day=0),
        make_record("c1", ServiceType.CLIENT_MEETING, day=1, depends_on=[]),
        make_record("x1", ServiceType.RESEARCH, day=2, depends_on=[]),
        make_record("v1", ServiceType.CASE_REVIEW, day=3, depends_on=["r1", "x1", "c1"]),
    ])

    assert [b.id for b in timeline.parallel_branches] == ["client_meeting", "research", "case_review"]
    assert timeline.merge_points == [
        MergePoint(event_id="v1", branch_ids=["main", "client_meeting", "research"]),
    ]


def test_required_event_off_the_critical_path_goes_parallel(synthesize):
    timeline = synthesize([
        make_record("r1", ServiceType.CONSULTATION, day=0),
        make_record("d1", ServiceType.DOCUMENT_PREPARATION, day=1, depends_on=[]),
        make_record("m1", ServiceType.MEDIATION, day=3),
    ])

    assert timeline.main_branch.event_ids == ["d1", "m1"]
    assert timeline.main_branch.events[1].dependencies == ["d1"]
    assert [b.title for b in timeline.parallel_branches] == ["CONSULTATION"]
    assert timeline.parallel_branches[0].event_ids == ["r1"]


def test_required_events_reaching_the_root_stay_on_main_branch(synthesize):
    # d1 is still open, so m1 also follows c1; both chains have length two
    timeline = synthesize([
        make_record("c1", ServiceType.CONSULTATION, day=0),
        make_record("d1", ServiceType.DOCUMENT_PREPARATION, day=1, status="in_progress"),
        make_record("m1", ServiceType.MEDIATION, day=2),
    ])

    main = timeline.main_branch
    assert main.event_ids == ["c1", "d1", "m1"]
    assert [e.dependencies for e in main.events] == [[], ["c1"], ["c1"]]
    assert timeline.parallel_branches == []
    assert timeline.merge_points == []
    assert main.status is TimelineStatus.IN_PROGRESS


def test_required_event_reaching_root_through_optional_work(synthesize):
    timeline = synthesize([
        make_record("c1", ServiceType.CONSULTATION, day=0),
        make_record("x1", ServiceType.RESEARCH, day=1, depends_on=["c1"]),
        make_record("d1", ServiceType.DOCUMENT_PREPARATION, day=2, depends_on=["x1"]),
    ])

    assert timeline.main_branch.event_ids[:2] == ["c1", "d1"]
    assert timeline.branch_of("x1").id == "research"
    assert timeline.merge_points == [
        MergePoint(event_id="x1", branch_ids=["main"]),
        MergePoint(event_id="d1", branch_ids=["research"]),
    ]


def test_unmet_dependency_blocks_branch(synthesize):
    timeline = synthesize([
        make_record("r0", ServiceType.CONSULTATION, day=0, status="cancelled"),
        make_record("d1", ServiceType.DOCUMENT_PREPARATION, day=1, depends_on=["r0"]),
    ])

    main = timeline.main_branch
    assert main.event_ids[0] == "d1"
    assert main.status is TimelineStatus.BLOCKED


def test_empty_input_gives_empty_main_branch(synthesize):
    timeline = synthesize([])

    assert timeline.main_branch.events == []
    assert timeline.main_branch.status is TimelineStatus.PENDING
    assert timeline.main_branch.progress == 0
    assert timeline.parallel_branches == []
    assert timeline.merge_points == []


def test_records_outside_timeline_are_dropped(synthesize):
    timeline = synthesize([
        make_record("r1", ServiceType.CONSULTATION, day=0),
        make_record("o1", ServiceType.COMMUNITY_OUTREACH, day=1),
        make_record("c1", ServiceType.RESEARCH, day=2, status="cancelled"),
        make_record("u1", "UNKNOWN_TYPE", day=3),
    ])

    placed = {e.id for b in timeline.all_branches() for e in b.events}
    assert "r1" in placed
    assert not placed & {"o1", "c1", "u1"}
    assert timeline.branch_of("o1") is None


def test_event_fields(synthesize):
    timeline = synthesize([
        make_record("r1", ServiceType.CONSULTATION, day=0, hours=2, description="Intake call"),
        make_record("d1", ServiceType.DOCUMENT_PREPARATION, day=1, status="in_progress"),
    ])

    done, open_ = timeline.main_branch.events[:2]
    assert done.title == "Service: Consultation"
    assert done.description == "Intake call"
    assert done.duration == 7200
    assert done.date.hour == 11
    assert open_.duration is None
    assert open_.status is TimelineStatus.IN_PROGRESS


def test_explicit_dependencies_are_deduplicated(synthesize):
    timeline = synthesize([
        make_record("r1", ServiceType.CONSULTATION, day=0),
        make_record("x1", ServiceType.RESEARCH, day=1, depends_on=["r1", "r1", "x1"]),
    ])

    research = timeline.branch_of("x1")
    assert research.events[0].dependencies == ["r1"]


def test_output_is_independent_of_input_order(synthesize):
    records = [
        make_record("r1", ServiceType.CONSULTATION, day=0),
        make_record("d1", ServiceType.DOCUMENT_PREPARATION, day=1),
        make_record("x1", ServiceType.RESEARCH, day=1),
        make_record("x2", ServiceType.RESEARCH, day=2, depends_on=["d1"]),
        make_record("c1", ServiceType.CLIENT_MEETING, day=2, status="in_progress"),
        make_record("m1", ServiceType.MEDIATION, day=4, depends_on=["x2"]),
    ]
    expected = synthesize(records)

    rng = random.Random(11)
    for _ in range(5):
        shuffled = records[:]
        rng.shuffle(shuffled)
        assert synthesize(shuffled) == expected


@pytest.mark.parametrize("category", list(CaseCategory))
def test_events_stay_within_category_services(synthesize, catalog, category):
    records = [make_record(f"r{i}", s, day=i) for i, s in enumerate(ServiceType)]
    entry = catalog.required_and_optional(category)

    timeline = synthesize(records, category)

    for branch in timeline.all_branches():
        for event in branch.events:
            assert entry.classify(event.service_type) is not None
    dates = [e.date for e in timeline.main_branch.events]
    assert dates == sorted(dates)
    assert timeline.main_branch.events
