from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Mapping, Sequence

from attendance_summary.models import (
    CandidateSlot,
    MatchResult,
    TimetableSlot,
    TransferChoice,
    TransferRequest,
)
from attendance_summary.services.errors import NotFoundError, ValidationError

log = logging.getLogger(__name__)

TRANSFER_PREFIX = "transfer-"
CHECKBOX_ON = "on"
_REPLACEMENT_KEY = re.compile(r"^replacement\[(?P<slot_id>[^\]]+)\]$")


def _first_present(form: Mapping[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = form.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def parse_transfer_request(form: Mapping[str, Any]) -> TransferRequest:
    """Build a TransferRequest from the raw checkbox submission.

    Checkboxes arrive as ``transfer-<slot id>`` keys set to ``"on"``; the order
    of the form is kept.
    """

    person_id = _first_present(form, "gibbonPersonID", "person_id")
    if person_id is None:
        raise ValidationError("Please select the corresponding student!")

    course_class_id = _first_present(form, "gibbonCourseClassID", "course_class_id")
    if course_class_id is None:
        raise ValidationError("Please select the corresponding course!")

    slot_ids = tuple(
        key[len(TRANSFER_PREFIX):]
        for key, value in form.items()
        if key.startswith(TRANSFER_PREFIX) and value == CHECKBOX_ON and len(key) > len(TRANSFER_PREFIX)
    )
    if not slot_ids:
        raise ValidationError("Please select the corresponding course(s)!")

    return TransferRequest(person_id=person_id, course_class_id=course_class_id, slot_ids=slot_ids)


def find_slot(rows: Iterable[TimetableSlot], slot_id: str) -> TimetableSlot:
    for row in rows:
        if row.slot_id == str(slot_id):
            return row
    raise NotFoundError(f"Timetable slot {slot_id} does not exist.")


def match_transfer_slots(
    request: TransferRequest,
    old_rows: Sequence[TimetableSlot],
    new_rows: Sequence[TimetableSlot],
) -> list[MatchResult]:
    """Propose same-timeslot replacements for every requested slot.

    Candidates share the old slot's timetable column/row and belong to a
    different course class. Requested ids missing from ``old_rows`` are dropped.
    """

    results: list[MatchResult] = []

    for slot_id in request.slot_ids:
        try:
            old_slot = find_slot(old_rows, slot_id)
        except NotFoundError:
            log.debug("Skipping transfer slot %s: not scheduled for the selected course", slot_id)
            continue

        candidates = tuple(
            CandidateSlot(
                course_class_id=row.course_class_id,
                course_name=row.course_name,
                slot_id=row.slot_id,
                period_name=row.period_name,
            )
            for row in new_rows
            if row.column_row_id == old_slot.column_row_id
            and row.course_class_id != old_slot.course_class_id
        )

        results.append(
            MatchResult(
                person_id=request.person_id,
                course_class_id=old_slot.course_class_id,
                course_name=old_slot.course_name,
                slot_id=old_slot.slot_id,
                period_name=old_slot.period_name,
                day_name=old_slot.day_name,
                column_row_id=old_slot.column_row_id,
                candidates=candidates,
            )
        )

    return results


def parse_replacement_choices(form: Mapping[str, Any]) -> list[TransferChoice]:
    choices: list[TransferChoice] = []

    for key, value in form.items():
        match = _REPLACEMENT_KEY.match(key)
        if not match:
            continue

        raw = str(value or "").strip()
        if not raw:
            continue

        course_class_id, separator, slot_id = raw.partition(".")
        if not separator or not course_class_id or not slot_id:
            raise ValidationError(f"Invalid replacement selection: {raw!r}")

        choices.append(
            TransferChoice(
                old_slot_id=match.group("slot_id"),
                new_course_class_id=course_class_id,
                new_slot_id=slot_id,
            )
        )

    return choices


def resolve_choices(
    results: Sequence[MatchResult],
    choices: Iterable[TransferChoice],
) -> list[tuple[MatchResult, CandidateSlot]]:
    by_slot = {result.slot_id: result for result in results}
    resolved: list[tuple[MatchResult, CandidateSlot]] = []

    for choice in choices:
        result = by_slot.get(choice.old_slot_id)
        if result is None:
            raise NotFoundError(f"Timetable slot {choice.old_slot_id} was not offered for transfer.")

        candidate = result.find_candidate(choice.new_course_class_id, choice.new_slot_id)
        if candidate is None:
            raise NotFoundError(
                f"{choice.new_course_class_id}.{choice.new_slot_id} is not a replacement for {result.heading}."
            )
        resolved.append((result, candidate))

    return resolved
