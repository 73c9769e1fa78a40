from __future__ import annotations

import pytest

from users_api.ingest.parser import build_user, expand_dotted, parse_age, parse_rows

HEADER = "name.firstName,name.lastName,age,address.city"


def test_parse_rows_maps_header_to_trimmed_values() -> None:
    rows = parse_rows(f"{HEADER}\n  Rohit , Prasad ,35, Pune \n")

    assert rows == [
        {"name.firstName": "Rohit", "name.lastName": "Prasad", "age": "35", "address.city": "Pune"}
    ]


def test_parse_rows_missing_trailing_fields_are_none() -> None:
    rows = parse_rows(f"{HEADER}\nRohit,Prasad\n")

    assert rows[0]["age"] is None
    assert rows[0]["address.city"] is None


def test_parse_rows_skips_blank_lines_and_handles_crlf() -> None:
    rows = parse_rows(f"{HEADER}\r\nRohit,Prasad,35,Pune\r\n\r\n\nAnita,Sharma,18,Delhi\r\n")

    assert [row["name.firstName"] for row in rows] == ["Rohit", "Anita"]
    assert rows[0]["address.city"] == "Pune"


def test_parse_rows_header_only_yields_nothing() -> None:
    assert parse_rows(HEADER + "\n") == []
    assert parse_rows("") == []


def test_parse_rows_respects_quoted_delimiters() -> None:
    rows = parse_rows(f'{HEADER}\nRohit,Prasad,35,"Pune, MH"\n')

    assert rows[0]["address.city"] == "Pune, MH"


def test_parse_rows_unbalanced_quote_stays_on_its_own_line() -> None:
    rows = parse_rows(
        "name.firstName,name.lastName,age\n\"Rohit,Prasad,35\nAnita,Sharma,18\nJohn,Smith,67\n"
    )

    assert len(rows) == 3
    assert rows[1] == {"name.firstName": "Anita", "name.lastName": "Sharma", "age": "18"}
    assert rows[2]["name.firstName"] == "John"


def test_parse_rows_strips_byte_order_mark() -> None:
    rows = parse_rows("\ufeff" + HEADER + "\nRohit,Prasad,35,Pune\n")

    assert rows[0]["name.firstName"] == "Rohit"


def test_expand_dotted_nests_paths() -> None:
    doc = expand_dotted(
        {"address.city": "Pune", "preferences.food.type": "veg", "gender": "male"}
    )

    assert doc == {
        "address": {"city": "Pune"},
        "preferences": {"food": {"type": "veg"}},
        "gender": "male",
    }


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("35", 35),
        ("", 0),
        (None, 0),
        ("abc", 0),
        ("42years", 42),
        ("3.9", 3),
        ("-4", -4),
        ("9" * 5000, 0),
    ],
)
def test_parse_age(raw: str | None, expected: int) -> None:
    assert parse_age(raw) == expected


def test_build_user_maps_every_column() -> None:
    row = {
        "name.firstName": "Rohit",
        "name.lastName": "Prasad",
        "age": "35",
        "address.line1": "A-563",
        "address.line2": None,
        "address.city": "Pune",
        "address.state": "Maharashtra",
        "gender": "male",
        "employment.status": "employed",
        "employment.company": "Acme",
        "preferences.food.type": "veg",
        "preferences.color.favorite": "blue",
    }

    user = build_user(row)

    assert user is not None
    assert user.name == "Rohit Prasad"
    assert user.age == 35
    assert user.address.model_dump() == {
        "line1": "A-563",
        "line2": None,
        "city": "Pune",
        "state": "Maharashtra",
    }
    assert user.additional_info.model_dump() == {
        "gender": "male",
        "employment": {"status": "employed", "company": "Acme"},
        "preferences": {"food": "veg", "color": "blue"},
    }


def test_build_user_discards_rows_without_first_name() -> None:
    assert build_user({"name.firstName": None, "name.lastName": "Prasad"}) is None
    assert build_user({"name.lastName": "Prasad"}) is None


def test_build_user_without_last_name_or_optional_columns() -> None:
    user = build_user({"name.firstName": "Omar"})

    assert user is not None
    assert user.name == "Omar"
    assert user.age == 0
    assert user.address.city is None
    assert user.additional_info.employment.status is None
    assert user.additional_info.preferences.color is None
