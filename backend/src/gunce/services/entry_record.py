"""
Entry record rules shared by every storage adapter.

Derived fields (word count, read time, weekday) are always computed here from
the content and date being written, never taken from the caller. When an
entry is encrypted its plaintext is cleared from the persisted record.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from ..core import crypto
from ..core.exceptions import DecryptionError, ValidationError
from ..models.base import generate_id, utcnow
from ..schemas.diary_entry import (
    DiaryEntryCreate,
    DiaryEntryRead,
    DiaryEntryRestore,
    DiaryEntryUpdate,
    Sentiment,
)

WORDS_PER_MINUTE = 200
DEFAULT_LOCALE = "tr"
DEFAULT_SENTIMENT_SCORE = 0.5

WEEKDAY_NAMES = {
    "tr": ("Pazartesi", "Salı", "Çarşamba", "Perşembe", "Cuma", "Cumartesi", "Pazar"),
    "en": ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
}


@dataclass(frozen=True)
class DerivedFields:
    word_count: int
    read_time: int
    day_of_week: str


def count_words(content: str) -> int:
    """Number of maximal whitespace-delimited tokens."""
    return len(content.split())


def weekday_name(entry_date: date, locale: str = DEFAULT_LOCALE) -> str:
    names = WEEKDAY_NAMES.get(locale, WEEKDAY_NAMES[DEFAULT_LOCALE])
    return names[entry_date.weekday()]


def derive_fields(content: str, entry_date: date, locale: str = DEFAULT_LOCALE) -> DerivedFields:
    word_count = count_words(content)
    return DerivedFields(
        word_count=word_count,
        read_time=math.ceil(word_count / WORDS_PER_MINUTE),
        day_of_week=weekday_name(entry_date, locale),
    )


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Strip, drop empties and de-duplicate while keeping first-seen order."""
    seen = set()
    result = []
    for tag in tags or []:
        name = tag.strip() if isinstance(tag, str) else ""
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    return result


def _required_text(value: Optional[str], field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(field, f"{field} is required")
    return text


def _is_sealed(data: DiaryEntryCreate) -> bool:
    return isinstance(data, DiaryEntryRestore) and data.is_encrypted and bool(data.encrypted_content)


def validate(data: DiaryEntryCreate) -> None:
    """
    Check required fields.

    Raises:
        ValidationError: title or content missing/blank. Sealed backup entries
            may omit content since only their package is stored.
    """
    _required_text(data.title, "title")
    if not _is_sealed(data):
        _required_text(data.content, "content")


def apply_encryption(record: Dict[str, Any], password: str) -> Dict[str, Any]:
    """Seal record['content'] under password and clear the plaintext."""
    if not password:
        raise ValidationError("password", "Password is required to encrypt an entry")
    record["encrypted_content"] = crypto.encrypt_text(record["content"], password)
    record["is_encrypted"] = True
    record["content"] = ""
    return record


def build_new_record(
    data: DiaryEntryCreate,
    password: Optional[str] = None,
    locale: str = DEFAULT_LOCALE,
) -> Dict[str, Any]:
    """
    Validate a create payload and produce the full row to store.

    The id and both timestamps are assigned here so that local and remote
    stores produce interchangeable records.
    """
    validate(data)
    now = utcnow()
    entry_date = data.entry_date or date.today()

    record: Dict[str, Any] = {
        "id": generate_id(),
        "title": data.title.strip(),
        "content": "",
        "encrypted_content": None,
        "is_encrypted": False,
        "entry_date": entry_date,
        "tags": normalize_tags(data.tags),
        "sentiment": (data.sentiment or Sentiment.NEUTRAL).value,
        "sentiment_score": DEFAULT_SENTIMENT_SCORE if data.sentiment_score is None else data.sentiment_score,
        "weather": data.weather,
        "location": data.location,
        "is_favorite": data.is_favorite,
        "created_at": now,
        "updated_at": now,
    }

    if _is_sealed(data):
        # Restored verbatim: the package is opaque here, counts come from the backup
        try:
            crypto.parse_package(data.encrypted_content)
        except DecryptionError as e:
            raise ValidationError("encrypted_content", "Encrypted content is not a valid package") from e
        record.update(
            encrypted_content=data.encrypted_content,
            is_encrypted=True,
            word_count=data.word_count or 0,
            read_time=data.read_time or 0,
            day_of_week=weekday_name(entry_date, locale),
        )
        return record

    content = data.content.strip()
    derived = derive_fields(content, entry_date, locale)
    record.update(
        content=content,
        word_count=derived.word_count,
        read_time=derived.read_time,
        day_of_week=derived.day_of_week,
    )
    if password:
        apply_encryption(record, password)
    return record


def merge_update(
    current: DiaryEntryRead,
    changes: DiaryEntryUpdate,
    password: Optional[str] = None,
    locale: str = DEFAULT_LOCALE,
) -> Dict[str, Any]:
    """
    Merge a partial update into an existing entry.

    Returns only the columns to write, always including a fresh updated_at.
    Derived fields are recomputed when content or entry_date change. Changing
    the content of an encrypted entry needs its password, which is checked
    against the existing package before re-encrypting.
    """
    update = changes.model_dump(exclude_unset=True)
    # Explicit nulls on non-nullable columns mean "unchanged"
    for key in ("title", "content", "entry_date", "tags", "sentiment", "sentiment_score", "is_favorite"):
        if key in update and update[key] is None:
            update.pop(key)

    values: Dict[str, Any] = {}

    if "title" in update:
        values["title"] = _required_text(update["title"], "title")
    if "tags" in update:
        values["tags"] = normalize_tags(update["tags"])
    if "sentiment" in update:
        values["sentiment"] = Sentiment(update["sentiment"]).value
    for key in ("sentiment_score", "weather", "location", "is_favorite"):
        if key in update:
            values[key] = update[key]

    entry_date = update.get("entry_date", current.entry_date)
    if entry_date != current.entry_date:
        values["entry_date"] = entry_date
        values["day_of_week"] = weekday_name(entry_date, locale)

    if "content" in update:
        content = _required_text(update["content"], "content")
        if current.is_encrypted:
            if not password:
                raise ValidationError("password", "Password is required to change encrypted content")
            # Wrong password surfaces as DecryptionError
            crypto.decrypt_text(current.encrypted_content, password)

        derived = derive_fields(content, entry_date, locale)
        values.update(
            content=content,
            encrypted_content=None,
            is_encrypted=False,
            word_count=derived.word_count,
            read_time=derived.read_time,
            day_of_week=derived.day_of_week,
        )
        if password:
            apply_encryption(values, password)
    elif password and not current.is_encrypted:
        # Protect an existing plaintext entry
        values["content"] = current.content
        apply_encryption(values, password)

    values["updated_at"] = utcnow()
    return values


def decrypt_entry(entry: DiaryEntryRead, password: str) -> DiaryEntryRead:
    """
    Return a copy of entry with its plaintext restored in memory.

    Raises:
        DecryptionError: Wrong password or corrupted package
    """
    if not entry.is_encrypted:
        return entry
    if not entry.encrypted_content:
        raise DecryptionError()
    plaintext = crypto.decrypt_text(entry.encrypted_content, password)
    return entry.model_copy(update={"content": plaintext})
