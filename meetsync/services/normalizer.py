"""
normalizer.py — decode the dynamically-typed fields of a recording row.

The cache stores action points, topics, key takeaways, questions and
participants as JSON text, while the API hands them over as lists. Either
form is resolved here, once, so everything downstream sees typed lists.

Contract:
  - Missing/empty value -> []
  - List -> validated items
  - JSON string -> decoded items, or [] (logged) when the text is corrupt
  - Nothing raises; one bad field never affects another.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..models.recording import (
    ActionPoint,
    KeyTakeaway,
    Participant,
    RecordingDetail,
    SuggestedMessage,
    Topic,
)

log = logging.getLogger("app.normalizer")

T = TypeVar("T", bound=BaseModel)

# Field name on the row -> item model it holds
DETAIL_FIELDS: Dict[str, Type[BaseModel]] = {
    "action_points": ActionPoint,
    "topics": Topic,
    "key_takeaways": KeyTakeaway,
    "questions": SuggestedMessage,
    "participants": Participant,
}

_adapters: Dict[Type[BaseModel], TypeAdapter] = {}


def _adapter(item_model: Type[T]) -> TypeAdapter:
    adapter = _adapters.get(item_model)
    if adapter is None:
        adapter = TypeAdapter(List[item_model])  # type: ignore[valid-type]
        _adapters[item_model] = adapter
    return adapter


def normalize(raw_value: Any, item_model: Type[T], field: str = "") -> List[T]:
    """Resolve ``raw_value`` to a list of ``item_model``; never raises."""
    if raw_value is None or raw_value == "" or raw_value == []:
        return []
    adapter = _adapter(item_model)
    label = field or item_model.__name__
    try:
        if isinstance(raw_value, (str, bytes)):
            return adapter.validate_json(raw_value)
        if isinstance(raw_value, (list, tuple)):
            return adapter.validate_python(list(raw_value), from_attributes=True)
    except ValidationError as e:
        log.warning(f"could not decode {label}: {e.error_count()} error(s): {e.errors()[0].get('msg', '')}")
        return []
    log.warning(f"could not decode {label}: unexpected {type(raw_value).__name__}")
    return []


def normalize_detail_fields(raw_detail: Mapping[str, Any]) -> RecordingDetail:
    """Build a :class:`RecordingDetail` with every dynamic field resolved to a list."""
    data = dict(raw_detail)
    for field, item_model in DETAIL_FIELDS.items():
        data[field] = normalize(data.get(field), item_model, field=field)
    # SQLite hands booleans back as 0/1 and NULL
    data["is_public"] = bool(data.get("is_public") or False)
    try:
        return RecordingDetail(**data)
    except ValidationError as e:
        bad = {err["loc"][0] for err in e.errors() if err.get("loc")}
        log.warning(f"dropping unreadable field(s) of recording {data.get('event_id')}: {sorted(map(str, bad))}")
    # Errors report aliased fields (categoryId) under the alias
    for name, info in RecordingDetail.model_fields.items():
        if name in bad or info.alias in bad:
            data.pop(name, None)
            if info.alias:
                data.pop(info.alias, None)
    data["event_id"] = str(raw_detail.get("event_id") or "")
    return RecordingDetail(**data)


def detail_texts(detail: RecordingDetail) -> Dict[str, Any]:
    """Flatten the normalized fields into the strings the detail view shows."""
    return {
        "action_point_texts": [p.item_text or "" for p in detail.action_points],
        "topic_texts": [f"{t.item_text or ''} - {t.description or ''}" for t in detail.topics],
        "key_takeaway_texts": [k.item_text or "" for k in detail.key_takeaways],
        "question_texts": [q.item_text or "" for q in detail.questions],
        "participant_count": detail.participant_count,
        "has_participants": detail.has_participants,
    }
