from datetime import time

import pytest

from agendatop.services.errors import ValidationError
from agendatop.services.slot_grid import (
    SLOT_LABELS,
    SLOTS_PER_DAY,
    is_grid_label,
    is_half_hour_aligned,
    label_to_time,
    normalize_label,
    slot_labels,
    time_to_label,
    validate_weekday,
)


def test_grid_has_33_half_hour_labels():
    labels = slot_labels()
    assert len(labels) == 33 == SLOTS_PER_DAY
    assert labels[0] == "06:00"
    assert labels[1] == "06:30"
    assert labels[-1] == "22:00"
    assert tuple(labels) == SLOT_LABELS


def test_grid_is_chronological_and_unique():
    assert list(SLOT_LABELS) == sorted(SLOT_LABELS)
    assert len(set(SLOT_LABELS)) == len(SLOT_LABELS)


@pytest.mark.parametrize(
    "label,expected",
    [("14:30", time(14, 30)), ("14:30:00", time(14, 30)), (" 06:00 ", time(6, 0))],
)
def test_label_to_time(label, expected):
    assert label_to_time(label) == expected


@pytest.mark.parametrize("label", ["", "1430", "14h30", "25:00", "14:3", "ab:cd"])
def test_label_to_time_rejects_malformed(label):
    with pytest.raises(ValidationError):
        label_to_time(label)


def test_time_to_label_truncates_seconds():
    assert time_to_label(time(9, 30, 45)) == "09:30"
    assert normalize_label("09:30:00") == "09:30"


def test_half_hour_alignment():
    assert is_half_hour_aligned(time(10, 0))
    assert is_half_hour_aligned(time(10, 30))
    assert not is_half_hour_aligned(time(10, 15))
    assert not is_half_hour_aligned(time(10, 30, 5))


def test_grid_membership():
    assert is_grid_label("06:00")
    assert is_grid_label("22:00")
    assert not is_grid_label("22:30")
    assert not is_grid_label("05:30")


def test_validate_weekday():
    assert validate_weekday(0) == 0
    assert validate_weekday(6) == 6
    with pytest.raises(ValidationError):
        validate_weekday(7)
