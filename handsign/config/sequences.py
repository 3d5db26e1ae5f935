"""Target sequence catalog loading and validation.

Two JSON layouts are accepted:

* mapping form: ``{"Fireball": ["Mi", "Tora", ...], ...}``
* list form: ``[{"id": "fireball", "name": "...", "level": "genin",
  "sequence": [...]}, ...]``

Every problem is reported at load time as a :class:`SequenceConfigError`;
nothing malformed reaches the matcher.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Collection, Dict, Iterator, List, Optional, Union

from ..core.constants import RANK_LEVELS, SIGN_DICTIONARY
from ..core.entities import SequenceTarget
from ..core.exceptions import SequenceConfigError

logger = logging.getLogger(__name__)

DEFAULT_SEQUENCES_PATH = Path(__file__).resolve().parent.parent / "data" / "jutsus.json"


class SequenceCatalog:
    """Immutable, ordered set of named target sequences."""

    def __init__(self, targets: List[SequenceTarget]):
        self._targets = tuple(targets)
        self._by_key: Dict[str, SequenceTarget] = {}
        for target in self._targets:
            self._by_key.setdefault(target.name, target)
            if target.target_id:
                self._by_key[target.target_id] = target

    @classmethod
    def from_data(cls, data: Any,
                  vocabulary: Optional[Collection[str]] = None,
                  level_keys: Optional[Collection[str]] = None) -> "SequenceCatalog":
        """Validate decoded JSON and build a catalog.

        Args:
            data: mapping or list form (see module docstring)
            vocabulary: allowed tokens, defaults to the sign dictionary
            level_keys: allowed level keys, defaults to the rank ladder
        """
        vocab = set(vocabulary) if vocabulary is not None else set(SIGN_DICTIONARY)
        levels = set(level_keys) if level_keys is not None else {lvl.key for lvl in RANK_LEVELS}

        if isinstance(data, dict):
            entries = [{"name": name, "sequence": seq} for name, seq in data.items()]
        elif isinstance(data, list):
            entries = data
        else:
            raise SequenceConfigError(
                f"Sequence catalog must be a JSON object or array, got {type(data).__name__}"
            )

        targets: List[SequenceTarget] = []
        seen_ids = set()
        for index, entry in enumerate(entries):
            targets.append(_parse_entry(index, entry, vocab, levels, seen_ids))

        if not targets:
            raise SequenceConfigError("Sequence catalog is empty")
        return cls(targets)

    def get(self, key: str) -> SequenceTarget:
        """Look up a target by id or name."""
        try:
            return self._by_key[key]
        except KeyError:
            raise KeyError(f"Unknown sequence target: {key}") from None

    def for_level(self, level_key: str) -> List[SequenceTarget]:
        return [t for t in self._targets if t.level == level_key]

    def names(self) -> List[str]:
        return [t.name for t in self._targets]

    def __iter__(self) -> Iterator[SequenceTarget]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, key: str) -> bool:
        return key in self._by_key


def _parse_entry(index: int, entry: Any, vocab: set, levels: set, seen_ids: set) -> SequenceTarget:
    if not isinstance(entry, dict):
        raise SequenceConfigError(f"Entry #{index} must be an object, got {type(entry).__name__}")

    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise SequenceConfigError(f"Entry #{index} has no name")

    sequence = entry.get("sequence")
    if not isinstance(sequence, list):
        raise SequenceConfigError(f"Sequence for '{name}' must be an array")
    if not sequence:
        raise SequenceConfigError(f"Sequence for '{name}' is empty")
    for position, token in enumerate(sequence):
        if not isinstance(token, str):
            raise SequenceConfigError(f"Token #{position} of '{name}' is not a string: {token!r}")
        if token not in vocab:
            raise SequenceConfigError(f"Unknown token '{token}' at position {position} of '{name}'")

    target_id = entry.get("id")
    if target_id is not None:
        target_id = str(target_id)
        if target_id in seen_ids:
            raise SequenceConfigError(f"Duplicate sequence id '{target_id}'")
        seen_ids.add(target_id)

    level = entry.get("level")
    if level is not None and level not in levels:
        raise SequenceConfigError(f"Unknown level '{level}' for '{name}'")

    return SequenceTarget(name=name, sequence=tuple(sequence), target_id=target_id, level=level)


def load_sequences(path: Union[str, Path, None] = None,
                   vocabulary: Optional[Collection[str]] = None) -> SequenceCatalog:
    """Load and validate a sequence catalog from a JSON file.

    Raises:
        SequenceConfigError: if the file is unreadable, not JSON, or malformed
    """
    path = Path(path) if path else DEFAULT_SEQUENCES_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise SequenceConfigError(f"Sequence catalog not found: {path}") from e
    except json.JSONDecodeError as e:
        raise SequenceConfigError(f"Sequence catalog '{path}' is not valid JSON: {e}") from e
    except OSError as e:
        raise SequenceConfigError(f"Cannot read sequence catalog '{path}': {e}") from e

    catalog = SequenceCatalog.from_data(data, vocabulary=vocabulary)
    logger.info(f"Loaded {len(catalog)} target sequences from '{path}'")
    return catalog
