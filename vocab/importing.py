"""
Deck import and legacy migration.

Deck CSV files need `word` and `meaning` columns; `pronunciation`,
`part_of_speech`, `example`, `source` and `tags` are optional. Rows without a
word or meaning are skipped and reported, never upserted.

The legacy SRS snapshot is a JSON object of entries shaped like
`{word, meaning, pronunciation, example, source, repetitions, interval,
easeFactor, nextReview, lastReview}` with epoch-millisecond timestamps.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

import pandas as pd
from pydantic import ValidationError

from vocab.clock import Clock
from vocab.errors import InvalidWordDataError
from vocab.schemas import (
    HistoryAction,
    HistoryEvent,
    RecordState,
    VocabRecord,
    WordData,
    make_record_id,
)
from vocab.srs.constants import DEFAULT_EASE_FACTOR, MASTERED_MIN_REPETITIONS, MIN_EASE_FACTOR

if TYPE_CHECKING:
    from vocab.service import VocabularyService

logger = logging.getLogger(__name__)

# ---- Deck format ----
WORD_COL = "word"
MEANING_COL = "meaning"
REQUIRED_COLUMNS = (WORD_COL, MEANING_COL)
OPTIONAL_COLUMNS = ("pronunciation", "part_of_speech", "example", "source", "tags")
TAG_SEPARATORS = (";", ",")


@dataclass
class DeckImportResult:
    """Parsed deck rows plus the rows that were rejected."""
    words: list[WordData] = field(default_factory=list)
    skipped: list[tuple[int, str]] = field(default_factory=list)  # (csv line, reason)
    imported: int = 0


def _split_tags(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    text = str(value)
    for sep in TAG_SEPARATORS:
        text = text.replace(sep, "|")
    return [t.strip() for t in text.split("|") if t.strip()]


def parse_word_data(row: Mapping[str, Any], default_source: str = "") -> WordData:
    """
    Validate one row of word data.

    Raises:
        InvalidWordDataError: if word or meaning is missing or blank
    """
    word = str(row.get(WORD_COL) or "").strip()
    meaning = str(row.get(MEANING_COL) or "").strip()
    if not word or not meaning:
        missing = [name for name, value in ((WORD_COL, word), (MEANING_COL, meaning)) if not value]
        raise InvalidWordDataError(f"Missing required field(s): {', '.join(missing)}")

    payload: dict[str, Any] = {
        WORD_COL: word,
        MEANING_COL: meaning,
        "source": str(row.get("source") or default_source or ""),
    }
    # Blank optional cells are left unset so a merge keeps the stored value
    for name in ("pronunciation", "part_of_speech", "example"):
        value = str(row.get(name) or "").strip()
        if value:
            payload[name] = value
    tags = _split_tags(row.get("tags"))
    if tags:
        payload["tags"] = tags
    try:
        return WordData.model_validate(payload)
    except ValidationError as exc:
        raise InvalidWordDataError(str(exc)) from exc


def read_deck(path: Union[Path, str], source: Optional[str] = None) -> DeckImportResult:
    """
    Read a deck CSV into validated word data.

    Args:
        path: CSV file
        source: Source for rows without one (default: file stem)

    Raises:
        InvalidWordDataError: if the file lacks a required column
    """
    path = Path(path)
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    result = read_deck_frame(df, source if source is not None else path.stem)
    if result.skipped:
        logger.warning("Skipped %d invalid rows in %s", len(result.skipped), path)
    return result


def read_deck_frame(df: pd.DataFrame, default_source: str = "") -> DeckImportResult:
    """
    Validate the rows of an already loaded deck.

    Raises:
        InvalidWordDataError: if the frame lacks a required column
    """
    df = df.copy()
    df.columns = [str(c).strip().lower() for c in df.columns]

    missing_cols = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing_cols:
        raise InvalidWordDataError(
            f"Deck must contain columns {list(REQUIRED_COLUMNS)}. "
            f"Found: {list(df.columns)}"
        )

    df = df.fillna("")
    result = DeckImportResult()
    seen: set[str] = set()
    for offset, row in enumerate(df.to_dict(orient="records")):
        line = offset + 2  # header is line 1
        try:
            data = parse_word_data(row, default_source)
        except InvalidWordDataError as exc:
            result.skipped.append((line, str(exc)))
            continue
        if data.record_id in seen:
            result.skipped.append((line, "Duplicate of an earlier row"))
            continue
        seen.add(data.record_id)
        result.words.append(data)
    return result


def import_deck(
    service: "VocabularyService",
    path: Union[Path, str],
    source: Optional[str] = None,
) -> DeckImportResult:
    """Read a deck and upsert every valid row."""
    result = read_deck(path, source)
    for data in result.words:
        service.upsert(data)
        result.imported += 1
    logger.info("Imported %d words from %s", result.imported, path)
    return result


# ---- Legacy migration ----

def _from_epoch_ms(value: Any, clock: Clock) -> Optional[datetime]:
    if value in (None, "", 0):
        return None
    try:
        seconds = float(value) / 1000.0
    except (TypeError, ValueError):
        return None
    return clock.to_local(datetime.fromtimestamp(seconds, tz=clock.now().tzinfo))


def _legacy_state(repetitions: int) -> RecordState:
    if repetitions >= MASTERED_MIN_REPETITIONS:
        return RecordState.MASTERED
    if repetitions >= 1:
        return RecordState.REVIEWING
    return RecordState.LEARNING


def convert_legacy_entry(old: Mapping[str, Any], clock: Clock) -> Optional[VocabRecord]:
    """
    Convert one legacy SRS entry; entries without word or meaning yield None.
    """
    word = str(old.get("word") or "").strip()
    meaning = str(old.get("meaning") or "").strip()
    if not word or not meaning:
        return None

    now = clock.now()
    repetitions = max(0, int(old.get("repetitions") or 0))
    next_review = _from_epoch_ms(old.get("nextReview"), clock) or now
    last_review = _from_epoch_ms(old.get("lastReview"), clock)
    source = str(old.get("source") or "").strip()

    return VocabRecord(
        id=make_record_id(source, word, meaning),
        word=word,
        meaning=meaning,
        pronunciation=str(old.get("pronunciation") or ""),
        example=str(old.get("example") or ""),
        source=source,
        state=_legacy_state(repetitions),
        next_review_date=clock.midnight_of(clock.local_day(next_review)),
        interval=max(1, int(old.get("interval") or 1)),
        ease_factor=max(MIN_EASE_FACTOR, float(old.get("easeFactor") or DEFAULT_EASE_FACTOR)),
        repetitions=repetitions,
        streak=repetitions,
        times_reviewed=repetitions,
        times_correct=repetitions,
        last_review_date=last_review,
        history=(HistoryEvent(timestamp=now, action=HistoryAction.CREATED, data={"imported": True}),),
        created_at=last_review or now,
        updated_at=now,
    )


def convert_legacy_entries(old_store: Mapping[str, Mapping[str, Any]], clock: Clock) -> list[VocabRecord]:
    records = []
    for key, old in old_store.items():
        record = convert_legacy_entry(old, clock)
        if record is None:
            logger.debug("Skipping legacy entry %r without word/meaning", key)
            continue
        records.append(record)
    return records


def load_legacy_file(path: Union[Path, str]) -> dict[str, dict]:
    with Path(path).open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise InvalidWordDataError(f"Legacy store {path} is not an object map")
    return data
