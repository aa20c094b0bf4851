"""
Learned-pattern store.

Holds the user-taught overrides that make tomorrow's parse better than
today's: merchant mappings, category corrections, custom keyword patterns
and parsing statistics. The whole document is loaded once (merged over
defaults) and rewritten after every mutation through a pluggable backend.

Known limitation: there is no cross-process coordination. Two processes
writing the same file will overwrite each other's updates; within one
process, mutations are serialized by a lock.
"""

import copy
import json
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from packages.core.config import get_settings
from packages.core.errors import PersistenceError

logger = structlog.get_logger()


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BankStat(_CamelModel):
    attempts: int = 0
    success: int = 0


class ParsingStats(_CamelModel):
    total_parsed: int = 0
    corrections_made: int = 0
    bank_stats: Dict[str, BankStat] = Field(default_factory=dict)


class CustomPattern(_CamelModel):
    keyword: str
    category: str
    added_at: str = ""


class LearnedPatterns(_CamelModel):
    """The persisted document. Missing keys fall back to these defaults."""

    merchant_mappings: Dict[str, str] = Field(default_factory=dict)
    category_corrections: Dict[str, str] = Field(default_factory=dict)
    custom_patterns: List[CustomPattern] = Field(default_factory=list)
    parsing_stats: ParsingStats = Field(default_factory=ParsingStats)


def _valid_custom_patterns(items: List[Any]) -> List[CustomPattern]:
    kept = []
    for item in items:
        try:
            kept.append(CustomPattern.model_validate(item))
        except ValidationError:
            continue
    return kept


class PatternBackend(Protocol):
    """Load/save contract for durable storage of the learned-pattern document."""

    def load(self) -> Optional[Dict[str, Any]]: ...

    def save(self, document: Dict[str, Any]) -> None: ...


class JsonFileBackend:
    """Stores the document as pretty-printed JSON at a fixed path."""

    def __init__(self, path: str):
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read learned patterns: {e}", path=str(self.path)) from e

    def save(self, document: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise PersistenceError(f"Could not write learned patterns: {e}", path=str(self.path)) from e


class InMemoryBackend:
    """Keeps the document in memory. Handy for tests and ephemeral runs."""

    def __init__(self, document: Optional[Dict[str, Any]] = None):
        self.document = copy.deepcopy(document) if document is not None else None
        self.save_count = 0

    def load(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self.document)

    def save(self, document: Dict[str, Any]) -> None:
        self.document = copy.deepcopy(document)
        self.save_count += 1


class LearnedPatternStore:
    """Process-wide learned patterns with write-through persistence."""

    def __init__(self, backend: Optional[PatternBackend] = None, autoload: bool = True):
        self.backend = backend if backend is not None else InMemoryBackend()
        self._lock = threading.RLock()
        self._patterns = LearnedPatterns()
        if autoload:
            self.load()

    # --- persistence -----------------------------------------------------

    def load(self) -> None:
        """Load from the backend, merging each top-level key over the defaults.

        A key whose value fails validation keeps its default; the other keys
        still load. Malformed custom-pattern entries are skipped one by one.
        """
        try:
            document = self.backend.load()
        except PersistenceError as e:
            logger.warning("learned_patterns_load_failed", detail=e.detail, path=e.path)
            return

        if not document:
            logger.info("learned_patterns_missing", backend=type(self.backend).__name__)
            return

        if not isinstance(document, dict):
            logger.warning("learned_patterns_invalid", keys=["<document>"])
            return

        patterns = LearnedPatterns()
        rejected: List[str] = []
        for name, field in LearnedPatterns.model_fields.items():
            key = field.alias or to_camel(name)
            if key not in document:
                continue
            value = document[key]
            if name == "custom_patterns" and isinstance(value, list):
                kept = _valid_custom_patterns(value)
                if len(kept) != len(value):
                    rejected.append(key)
                patterns.custom_patterns = kept
                continue
            try:
                partial = LearnedPatterns.model_validate({key: value})
            except ValidationError:
                rejected.append(key)
                continue
            setattr(patterns, name, getattr(partial, name))

        if rejected:
            logger.warning("learned_patterns_invalid", keys=rejected)

        with self._lock:
            self._patterns = patterns
        logger.info(
            "learned_patterns_loaded",
            merchants=len(patterns.merchant_mappings),
            corrections=len(patterns.category_corrections),
            custom_patterns=len(patterns.custom_patterns),
        )

    def save(self) -> None:
        """Write the full document; failures are logged, never raised."""
        with self._lock:
            document = self.to_document()
        try:
            self.backend.save(document)
        except PersistenceError as e:
            logger.error("learned_patterns_save_failed", detail=e.detail, path=e.path)

    def to_document(self) -> Dict[str, Any]:
        return self._patterns.model_dump(by_alias=True)

    # --- read access -----------------------------------------------------

    @property
    def merchant_mappings(self) -> Dict[str, str]:
        return self._patterns.merchant_mappings

    @property
    def category_corrections(self) -> Dict[str, str]:
        return self._patterns.category_corrections

    @property
    def custom_patterns(self) -> List[CustomPattern]:
        return self._patterns.custom_patterns

    @property
    def parsing_stats(self) -> ParsingStats:
        return self._patterns.parsing_stats

    def lookup_merchant(self, raw_description: str) -> Optional[str]:
        return self._patterns.merchant_mappings.get((raw_description or "").upper())

    def lookup_category(self, normalized_merchant: str) -> Optional[str]:
        return self._patterns.category_corrections.get((normalized_merchant or "").lower())

    # --- mutations (each one persists before returning) -------------------

    def record_correction(self, normalized_merchant: str, category: str) -> None:
        """Store a category override keyed by the lowercased normalized merchant."""
        with self._lock:
            key = (normalized_merchant or "").lower()
            self._patterns.category_corrections[key] = category
            self._patterns.parsing_stats.corrections_made += 1
            self.save()
        logger.info("learned_category_correction", merchant=key, category=category)

    def record_merchant_mapping(self, raw_description: str, canonical_name: str) -> None:
        """Map an exact raw description (uppercased) to a canonical merchant."""
        with self._lock:
            key = (raw_description or "").upper()
            self._patterns.merchant_mappings[key] = canonical_name
            self.save()
        logger.info("learned_merchant_mapping", raw=key, merchant=canonical_name)

    def record_custom_pattern(self, keyword: str, category: str) -> CustomPattern:
        """Append a keyword -> category rule, checked in insertion order."""
        pattern = CustomPattern(
            keyword=keyword,
            category=category,
            added_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            self._patterns.custom_patterns.append(pattern)
            self.save()
        logger.info("custom_pattern_added", keyword=keyword, category=category)
        return pattern

    def record_parse(self, count: int, bank: Optional[str] = None, bank_succeeded: bool = False) -> None:
        """Update parsing statistics for one completed parse and flush once."""
        with self._lock:
            stats = self._patterns.parsing_stats
            if bank:
                bank_stat = stats.bank_stats.setdefault(bank, BankStat())
                bank_stat.attempts += 1
                if bank_succeeded:
                    bank_stat.success += 1
            stats.total_parsed += count
            self.save()

    def stats(self) -> Dict[str, Any]:
        """Parsing statistics plus sizes of each learned collection."""
        with self._lock:
            data = self._patterns.parsing_stats.model_dump(by_alias=True)
            data["learnedMerchants"] = len(self._patterns.merchant_mappings)
            data["categoryCorrections"] = len(self._patterns.category_corrections)
            data["customPatterns"] = len(self._patterns.custom_patterns)
        return data


_default_store: Optional[LearnedPatternStore] = None
_default_lock = threading.Lock()


def get_default_store() -> LearnedPatternStore:
    """Lazily create the process-wide store backed by the configured JSON file."""
    global _default_store
    with _default_lock:
        if _default_store is None:
            settings = get_settings()
            _default_store = LearnedPatternStore(JsonFileBackend(settings.LEARNED_PATTERNS_PATH))
        return _default_store


def set_default_store(store: Optional[LearnedPatternStore]) -> None:
    """Replace (or with None, reset) the process-wide store."""
    global _default_store
    with _default_lock:
        _default_store = store
