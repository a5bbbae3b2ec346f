import itertools
import string

import pytest

from pyrink.workbook.addressing import (
    build_range_address,
    column_letters_to_number,
    column_number_to_letters,
    parse_cell_reference,
    quote_sheet_name,
    split_range_address,
)


def _labels_through_zz():
    letters = string.ascii_uppercase
    yield from letters
    for first, second in itertools.product(letters, repeat=2):
        yield first + second


def test_column_labels_are_bijective_through_zz():
    labels = list(_labels_through_zz())
    assert len(labels) == 26 + 26 * 26
    for expected_number, label in enumerate(labels, start=1):
        assert column_letters_to_number(label) == expected_number
        assert column_number_to_letters(column_letters_to_number(label)) == label


@pytest.mark.parametrize(
    "label, number",
    [("A", 1), ("Z", 26), ("AA", 27), ("AZ", 52), ("BA", 53), ("ZZ", 702), ("AAA", 703), ("XFD", 16384)],
)
def test_column_label_known_values(label: str, number: int):
    assert column_letters_to_number(label) == number
    assert column_number_to_letters(number) == label


def test_column_letters_are_case_insensitive():
    assert column_letters_to_number("ab") == 28


@pytest.mark.parametrize("bad", ["", "A1", "Ä", " "])
def test_column_letters_reject_invalid_labels(bad: str):
    with pytest.raises(ValueError):
        column_letters_to_number(bad)


def test_column_number_rejects_zero():
    with pytest.raises(ValueError):
        column_number_to_letters(0)


def test_parse_cell_reference():
    ref = parse_cell_reference("C4")
    assert ref.column == "C"
    assert ref.row == 4
    assert str(ref) == "C4"


def test_parse_cell_reference_with_sheet_and_absolute_markers():
    ref = parse_cell_reference("'My Sheet'!$AB$12")
    assert (ref.column, ref.row) == ("AB", 12)


@pytest.mark.parametrize("bad", ["", "4C", "C0", "C", "12"])
def test_parse_cell_reference_rejects_malformed(bad: str):
    with pytest.raises(ValueError):
        parse_cell_reference(bad)


def test_build_range_address():
    assert build_range_address("Sheet1", "A", 1, 4, 3) == "Sheet1!A1:D3"


def test_build_range_address_crosses_letter_boundary():
    assert build_range_address("Events", "X", 2, 16, 6) == "Events!X2:AM7"


def test_build_range_address_single_cell_block():
    assert build_range_address("S", "B", 5, 1, 1) == "S!B5:B5"


def test_build_range_address_rejects_empty_block():
    with pytest.raises(ValueError):
        build_range_address("Sheet1", "A", 1, 0, 3)


@pytest.mark.parametrize(
    "name, quoted",
    [
        ("", "Sheet1"),
        (None, "Sheet1"),
        ("Roster", "Roster"),
        ("Game Log", "'Game Log'"),
        ("Coach's Sheet", "'Coach''s Sheet'"),
        ("Wow!", "'Wow!'"),
        ("Tab\tName", "'Tab\tName'"),
    ],
)
def test_quote_sheet_name(name, quoted):
    assert quote_sheet_name(name) == quoted


def test_split_range_address_unquotes_sheet():
    assert split_range_address("'Coach''s Sheet'!B2:E9") == ("Coach's Sheet", "B2", "E9")
    assert split_range_address("A1") == (None, "A1", None)
