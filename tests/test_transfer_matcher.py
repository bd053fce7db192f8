import pytest

from attendance_summary.models import TimetableSlot, TransferChoice, TransferRequest
from attendance_summary.services import (
    NotFoundError,
    ValidationError,
    find_slot,
    match_transfer_slots,
    parse_replacement_choices,
    parse_transfer_request,
    resolve_choices,
)


def slot(course_class_id, slot_id, column_row_id, *, course_name=None, period="P1", day="Day 1 - Mon"):
    return TimetableSlot(
        course_class_id=course_class_id,
        slot_id=slot_id,
        course_name=course_name or f"Course {course_class_id}",
        period_name=period,
        day_name=day,
        column_row_id=column_row_id,
    )


def test_candidates_share_the_timeslot_and_belong_to_other_courses():
    old_rows = [slot("A", "S1", "X")]
    new_rows = [slot("A", "S1", "X"), slot("B", "S2", "X"), slot("B", "S3", "Y")]
    request = TransferRequest(person_id="p-1", course_class_id="A", slot_ids=("S1",))

    [result] = match_transfer_slots(request, old_rows, new_rows)

    assert result.person_id == "p-1"
    assert result.course_class_id == "A"
    assert result.slot_id == "S1"
    assert result.column_row_id == "X"
    assert [(c.course_class_id, c.slot_id) for c in result.candidates] == [("B", "S2")]


def test_missing_slot_is_skipped_and_others_still_match():
    old_rows = [slot("A", "S1", "X"), slot("A", "S4", "Y", period="P2")]
    new_rows = [slot("B", "S2", "X"), slot("C", "S5", "Y"), slot("D", "S6", "Y")]
    request = TransferRequest(person_id="p-1", course_class_id="A", slot_ids=("S4", "missing", "S1"))

    results = match_transfer_slots(request, old_rows, new_rows)

    assert [result.slot_id for result in results] == ["S4", "S1"]
    assert [c.slot_id for c in results[0].candidates] == ["S5", "S6"]


def test_slot_without_candidates_still_produces_a_result():
    request = TransferRequest(person_id="p-1", course_class_id="A", slot_ids=("S1",))

    [result] = match_transfer_slots(request, [slot("A", "S1", "X")], [slot("A", "S1", "X")])

    assert not result.has_candidates
    assert result.candidates == ()


def test_matching_is_repeatable():
    old_rows = [slot("A", "S1", "X")]
    new_rows = [slot("B", "S2", "X")]
    request = TransferRequest(person_id="p-1", course_class_id="A", slot_ids=("S1",))

    assert match_transfer_slots(request, old_rows, new_rows) == match_transfer_slots(request, old_rows, new_rows)


def test_result_display_helpers():
    request = TransferRequest(person_id="p-1", course_class_id="A", slot_ids=("S1",))
    [result] = match_transfer_slots(
        request,
        [slot("A", "S1", "X", course_name="MATH.1A", day="Day 1 - Mon")],
        [slot("B", "S2", "X", course_name="MATH.1B", period="Period 3")],
    )

    assert result.display_day == "  - "
    assert result.heading == "MATH.1A (  -  / P1)"
    [candidate] = result.candidates
    assert candidate.option_value == "B.S2"
    assert candidate.option_label == "MATH.1B - Period 3"


def test_parse_transfer_request_reads_checked_slots_in_form_order():
    form = {
        "gibbonPersonID": "0042",
        "gibbonCourseClassID": "17",
        "transfer-9": "on",
        "transfer-3": "on",
        "transfer-5": "",
        "other": "on",
    }

    request = parse_transfer_request(form)

    assert request == TransferRequest(person_id="0042", course_class_id="17", slot_ids=("9", "3"))


def test_parse_transfer_request_accepts_plain_keys():
    request = parse_transfer_request({"person_id": "7", "course_class_id": "2", "transfer-1": "on"})
    assert request.person_id == "7"
    assert request.course_class_id == "2"


@pytest.mark.parametrize(
    "form, message",
    [
        ({"gibbonCourseClassID": "17", "transfer-1": "on"}, "student"),
        ({"gibbonPersonID": "0042", "transfer-1": "on"}, "course!"),
        ({"gibbonPersonID": "0042", "gibbonCourseClassID": "17"}, "course(s)!"),
        ({"gibbonPersonID": " ", "gibbonCourseClassID": "17", "transfer-1": "on"}, "student"),
    ],
)
def test_parse_transfer_request_requires_selections(form, message):
    with pytest.raises(ValidationError) as excinfo:
        parse_transfer_request(form)
    assert message in str(excinfo.value)


def test_find_slot_raises_not_found():
    with pytest.raises(NotFoundError):
        find_slot([slot("A", "S1", "X")], "S2")


def test_parse_replacement_choices_skips_blank_selections():
    form = {
        "replacement[S1]": "B.S2",
        "replacement[S4]": "",
        "gibbonPersonID": "0042",
    }

    assert parse_replacement_choices(form) == [
        TransferChoice(old_slot_id="S1", new_course_class_id="B", new_slot_id="S2")
    ]


def test_parse_replacement_choices_rejects_malformed_values():
    with pytest.raises(ValidationError):
        parse_replacement_choices({"replacement[S1]": "B"})


def test_resolve_choices_requires_offered_candidates():
    request = TransferRequest(person_id="p-1", course_class_id="A", slot_ids=("S1",))
    results = match_transfer_slots(request, [slot("A", "S1", "X")], [slot("B", "S2", "X"), slot("C", "S3", "Y")])

    [(result, candidate)] = resolve_choices(results, [TransferChoice("S1", "B", "S2")])
    assert result.slot_id == "S1"
    assert candidate.slot_id == "S2"

    with pytest.raises(NotFoundError):
        resolve_choices(results, [TransferChoice("S1", "C", "S3")])
    with pytest.raises(NotFoundError):
        resolve_choices(results, [TransferChoice("S9", "B", "S2")])
