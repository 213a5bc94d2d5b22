"""Translation memory with exact and fuzzy (edit distance) lookup."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from rapidfuzz.distance import Levenshtein

from ..models import TranslationMemoryEntry
from ..services.json_store import AsyncJsonStore
from .cache import content_key

logger = logging.getLogger(__name__)


@dataclass
class MemoryMatch:
    """A translation found in memory."""

    translation: str
    confidence: float
    match_type: str  # "exact" or "fuzzy"
    entry: TranslationMemoryEntry
    similarity: float = 1.0


def similarity(text1: str, text2: str) -> float:
    """Case-insensitive normalized Levenshtein similarity in [0, 1]."""
    max_length = max(len(text1), len(text2))
    if max_length == 0:
        return 1.0
    distance = Levenshtein.distance(text1.lower(), text2.lower())
    return (max_length - distance) / max_length


class TranslationMemory:
    """
    Stores previous translations of (text, from_lang, to_lang, context).

    Fuzzy lookup scans every entry of the language pair, which is fine for a
    storefront's few thousand strings but would need an n-gram index beyond.
    """

    def __init__(self, fuzzy_threshold: float = 0.8, store: Optional[AsyncJsonStore] = None):
        """
        Initialize the translation memory.

        Args:
            fuzzy_threshold: Minimum similarity (and weighted confidence) for a fuzzy match
            store: Optional persistent store; memory stays authoritative if it fails
        """
        self.fuzzy_threshold = fuzzy_threshold
        self.backend = store
        self._entries: Dict[str, TranslationMemoryEntry] = {}

    @staticmethod
    def make_key(
        text: str,
        from_lang: str,
        to_lang: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> str:
        return content_key(from_lang, to_lang, text, dict(context or {}))

    def find_match(
        self,
        text: str,
        from_lang: str,
        to_lang: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> Optional[MemoryMatch]:
        """
        Look up a previous translation.

        Returns an exact match (confidence 1.0) when the full key is known,
        otherwise the best fuzzy candidate of the same language pair, or None.
        """
        key = self.make_key(text, from_lang, to_lang, context)
        exact = self._entries.get(key)
        if exact is not None:
            exact.usage_count += 1
            return MemoryMatch(
                translation=exact.translation,
                confidence=1.0,
                match_type="exact",
                entry=exact,
            )

        best: Optional[MemoryMatch] = None
        for entry in self._entries.values():
            if entry.from_lang != from_lang or entry.to_lang != to_lang:
                continue
            score = similarity(text, entry.original_text)
            if score < self.fuzzy_threshold:
                continue
            confidence = score * entry.confidence
            if confidence < self.fuzzy_threshold:
                continue
            if best is None or confidence > best.confidence:
                best = MemoryMatch(
                    translation=entry.translation,
                    confidence=confidence,
                    match_type="fuzzy",
                    entry=entry,
                    similarity=score,
                )

        if best is not None:
            best.entry.usage_count += 1
        return best

    async def store(
        self,
        original_text: str,
        translation: str,
        from_lang: str,
        to_lang: str,
        confidence: float,
        context: Optional[Mapping[str, Any]] = None,
    ) -> TranslationMemoryEntry:
        """Insert or overwrite the entry for this exact key."""
        key = self.make_key(original_text, from_lang, to_lang, context)
        previous = self._entries.get(key)

        entry = TranslationMemoryEntry(
            key=key,
            original_text=original_text,
            translation=translation,
            from_lang=from_lang,
            to_lang=to_lang,
            confidence=confidence,
            context=dict(context or {}),
            created_at=previous.created_at if previous else datetime.now().isoformat(),
            usage_count=previous.usage_count if previous else 1,
        )
        self._entries[key] = entry
        await self._persist(entry)
        return entry

    async def delete(self, key: str) -> Optional[TranslationMemoryEntry]:
        """Remove an entry so it no longer matches; returns the removed entry."""
        entry = self._entries.pop(key, None)
        if entry is None or self.backend is None:
            return entry
        try:
            await self.backend.delete(key)
        except Exception as e:
            logger.error(
                "Failed to delete translation memory entry (%s -> %s): %s",
                entry.from_lang, entry.to_lang, e,
            )
        return entry

    async def _persist(self, entry: TranslationMemoryEntry) -> None:
        if self.backend is None:
            return
        try:
            await self.backend.save(entry.key, entry.to_dict())
        except Exception as e:
            logger.error(
                "Failed to persist translation memory entry (%s -> %s): %s",
                entry.from_lang, entry.to_lang, e,
            )

    async def load(self) -> int:
        """Load persisted entries; returns how many were loaded."""
        if self.backend is None:
            return 0
        try:
            records = await self.backend.load()
        except Exception as e:
            logger.error("Failed to load translation memory: %s", e)
            return 0

        loaded = 0
        for record in records.values():
            try:
                entry = TranslationMemoryEntry.from_dict(record)
            except TypeError as e:
                logger.warning("Skipping malformed translation memory record: %s", e)
                continue
            self._entries[entry.key] = entry
            loaded += 1
        return loaded

    def get(self, key: str) -> Optional[TranslationMemoryEntry]:
        return self._entries.get(key)

    def entries(self) -> List[TranslationMemoryEntry]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
