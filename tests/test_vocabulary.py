"""Tests for the option vocabularies."""

from __future__ import annotations

import pytest

from maestro.music.vocabulary import Goal, Instrument, Key, Style, major_keys, minor_keys, parse_choice


@pytest.mark.parametrize("raw", ["C_MAJOR", "c-major", "c major", "Do Mayor", "  do mayor  "])
def test_parse_choice_accepts_names_and_labels(raw: str) -> None:
    assert parse_choice(Key, raw) is Key.C_MAJOR


def test_parse_choice_accepts_accented_label() -> None:
    assert parse_choice(Instrument, "violín") is Instrument.VIOLIN
    assert parse_choice(Goal, "componer canciones") is Goal.SONGWRITING


def test_parse_choice_lists_options_on_error() -> None:
    with pytest.raises(ValueError) as excinfo:
        parse_choice(Style, "reggaeton")

    message = str(excinfo.value)
    assert "reggaeton" in message
    assert "Clásico" in message


def test_keys_split_into_major_and_minor() -> None:
    majors = major_keys()
    minors = minor_keys()

    assert len(majors) == 12
    assert len(minors) == 12
    assert majors[0] is Key.C_MAJOR
    assert minors[0] is Key.A_MINOR
    assert set(majors).isdisjoint(minors)
