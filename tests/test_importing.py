"""
Tests for deck CSV import and legacy snapshot conversion.
"""

import json
from datetime import datetime, timezone

import pandas as pd
import pytest

from vocab.errors import InvalidWordDataError
from vocab.importing import (
    convert_legacy_entry,
    import_deck,
    load_legacy_file,
    parse_word_data,
    read_deck,
    read_deck_frame,
)
from vocab.schemas import RecordState

DECK_CSV = """Word,Meaning,Pronunciation,Tags
abandon,to leave behind,/əˈbændən/,verb; ielts
,missing word,,
benefit,,,
benefit,advantage,,noun
Abandon , To leave behind,,
"""


@pytest.fixture
def deck_path(tmp_path):
    path = tmp_path / "ielts_week1.csv"
    path.write_text(DECK_CSV, encoding="utf-8")
    return path


class TestParseWordData:

    def test_valid_row(self):
        data = parse_word_data({"word": " cease ", "meaning": "to stop", "tags": "verb,formal"})
        assert data.word == "cease"
        assert data.tags == ["verb", "formal"]

    def test_default_source(self):
        assert parse_word_data({"word": "a", "meaning": "b"}, default_source="deck").source == "deck"
        assert parse_word_data({"word": "a", "meaning": "b", "source": "own"}, "deck").source == "own"

    def test_blank_optional_cells_stay_unset(self):
        data = parse_word_data({"word": "cease", "meaning": "to stop", "pronunciation": " ", "tags": ""})
        assert "pronunciation" not in data.model_fields_set
        assert "tags" not in data.model_fields_set
        assert data.pronunciation == ""

    @pytest.mark.parametrize("row, missing", [
        ({"word": "", "meaning": "x"}, "word"),
        ({"word": "x", "meaning": "  "}, "meaning"),
        ({}, "word, meaning"),
    ])
    def test_missing_fields(self, row, missing):
        with pytest.raises(InvalidWordDataError, match=f"Missing required field\\(s\\): {missing}"):
            parse_word_data(row)


class TestReadDeck:

    def test_skips_invalid_and_duplicate_rows(self, deck_path):
        result = read_deck(deck_path)

        assert [w.word for w in result.words] == ["abandon", "benefit"]
        assert [line for line, _ in result.skipped] == [3, 4, 6]
        assert result.skipped[-1][1] == "Duplicate of an earlier row"

    def test_source_defaults_to_file_stem(self, deck_path):
        result = read_deck(deck_path)
        assert {w.source for w in result.words} == {"ielts_week1"}

    def test_explicit_source(self, deck_path):
        assert read_deck(deck_path, source="IELTS").words[0].source == "IELTS"

    def test_optional_columns(self, deck_path):
        first = read_deck(deck_path).words[0]
        assert first.pronunciation == "/əˈbændən/"
        assert first.tags == ["verb", "ielts"]

    def test_missing_column(self):
        with pytest.raises(InvalidWordDataError, match="must contain columns"):
            read_deck_frame(pd.DataFrame({"word": ["a"], "definition": ["b"]}))


class TestImportDeck:

    def test_upserts_valid_rows(self, service, deck_path):
        result = import_deck(service, deck_path)
        assert result.imported == 2
        assert len(service.get_all()) == 2
        assert all(r.state == RecordState.NEW for r in service.get_all())

    def test_reimport_merges(self, service, deck_path):
        import_deck(service, deck_path)
        import_deck(service, deck_path)
        assert len(service.get_all()) == 2

    def test_reimport_without_optional_columns_keeps_content(self, service, deck_path, tmp_path):
        import_deck(service, deck_path)
        bare = tmp_path / "bare.csv"
        bare.write_text("Word,Meaning\nabandon,to leave behind\n", encoding="utf-8")
        import_deck(service, bare, source="ielts_week1")

        record = service.get_by_word("ielts_week1", "abandon", "to leave behind")
        assert record.pronunciation == "/əˈbændən/"
        assert record.tags == ["verb", "ielts"]


class TestLegacyEntries:

    def test_repetitions_map_to_state(self, clock):
        base = {"word": "w", "meaning": "m"}
        assert convert_legacy_entry({**base, "repetitions": 0}, clock).state == RecordState.LEARNING
        assert convert_legacy_entry({**base, "repetitions": 2}, clock).state == RecordState.REVIEWING
        assert convert_legacy_entry({**base, "repetitions": 5}, clock).state == RecordState.MASTERED

    def test_defaults_and_floors(self, clock):
        record = convert_legacy_entry({"word": "w", "meaning": "m", "interval": 0, "easeFactor": 1.1}, clock)
        assert record.interval == 1
        assert record.ease_factor == 1.3
        assert record.next_review_date == clock.today_start()
        assert record.last_review_date is None
        assert record.created_at == clock.now()

    def test_created_at_from_last_review(self, clock):
        last = datetime(2026, 2, 1, 12, 0, tzinfo=timezone.utc)
        record = convert_legacy_entry(
            {"word": "w", "meaning": "m", "lastReview": int(last.timestamp() * 1000)}, clock
        )
        assert record.created_at == last

    def test_blank_entry(self, clock):
        assert convert_legacy_entry({"word": "w"}, clock) is None

    def test_load_legacy_file(self, tmp_path):
        path = tmp_path / "srs.json"
        path.write_text(json.dumps({"w": {"word": "w", "meaning": "m"}}), encoding="utf-8")
        assert load_legacy_file(path) == {"w": {"word": "w", "meaning": "m"}}

        path.write_text("[]", encoding="utf-8")
        with pytest.raises(InvalidWordDataError):
            load_legacy_file(path)
