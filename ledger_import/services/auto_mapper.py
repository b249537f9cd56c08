from __future__ import annotations

import difflib
import logging
import re
from collections.abc import Sequence
from typing import Protocol

from ledger_import.models.field_spec import AliasEntry, FieldMapping, TargetFieldSpec

"""Column auto-mapping: propose source header -> target field pairs.

Headers and candidates are compared after normalization (lower-case, no
underscores, hyphens or whitespace). The candidates of a target field are its
key, its label and, when an alias entry exists for it, every alias.

The matching rule is a strategy object. FirstMatchStrategy is the default:
the first target field (declaration order) with a candidate that equals,
contains or is contained in the header wins, with no scoring. Ambiguous
headers therefore bind to whichever target is declared first.
SimilarityMatchStrategy scores candidates with difflib instead.
"""

__all__ = [
    "normalize_header",
    "candidate_names",
    "MatchStrategy",
    "FirstMatchStrategy",
    "SimilarityMatchStrategy",
    "auto_map",
]

logger = logging.getLogger(__name__)

_STRIP = re.compile(r"[_\s-]")


def normalize_header(name: str) -> str:
    return _STRIP.sub("", str(name).lower())


def candidate_names(target: TargetFieldSpec, alias: AliasEntry | None = None) -> list[str]:
    """Normalized candidates of a target field, empty strings dropped."""
    names = [normalize_header(target.field), normalize_header(target.label)]
    if alias is not None:
        names.extend(normalize_header(a) for a in alias.aliases)
    return [n for n in names if n]


class MatchStrategy(Protocol):
    def match(
        self,
        header: str,
        target_fields: Sequence[TargetFieldSpec],
        candidates: dict[str, list[str]],
    ) -> TargetFieldSpec | None:
        """Return the target field for `header` (already normalized) or None."""
        ...


class FirstMatchStrategy:
    """First target with an equal / containing / contained candidate wins."""

    def match(
        self,
        header: str,
        target_fields: Sequence[TargetFieldSpec],
        candidates: dict[str, list[str]],
    ) -> TargetFieldSpec | None:
        for target in target_fields:
            for cand in candidates[target.field]:
                if header == cand or cand in header or header in cand:
                    return target
        return None


class SimilarityMatchStrategy:
    """Best difflib ratio across all candidates, kept when >= threshold.

    Ties keep the earlier target field.
    """

    def __init__(self, threshold: float = 0.8) -> None:
        self.threshold = threshold

    def match(
        self,
        header: str,
        target_fields: Sequence[TargetFieldSpec],
        candidates: dict[str, list[str]],
    ) -> TargetFieldSpec | None:
        best: TargetFieldSpec | None = None
        best_ratio = 0.0
        for target in target_fields:
            for cand in candidates[target.field]:
                ratio = difflib.SequenceMatcher(None, header, cand).ratio()
                if ratio > best_ratio:
                    best_ratio = ratio
                    best = target
        if best is not None and best_ratio >= self.threshold:
            return best
        return None


def auto_map(
    headers: Sequence[str],
    target_fields: Sequence[TargetFieldSpec],
    aliases: Sequence[AliasEntry] | None = None,
    strategy: MatchStrategy | None = None,
) -> list[FieldMapping]:
    """Propose one FieldMapping per header that matches a target field.

    Several headers may propose the same target field; the mapping editor
    keeps the last one. Headers that normalize to "" are never mapped.
    """
    if strategy is None:
        strategy = FirstMatchStrategy()
    alias_by_target = {a.target_field: a for a in (aliases or ())}
    candidates = {
        t.field: candidate_names(t, alias_by_target.get(t.field)) for t in target_fields
    }

    mappings: list[FieldMapping] = []
    for header in headers:
        normalized = normalize_header(header)
        if not normalized:
            continue
        target = strategy.match(normalized, target_fields, candidates)
        if target is None:
            logger.debug("auto-map: no target for header=%r", header)
            continue
        mappings.append(FieldMapping(source_field=header, target_field=target.field))
    logger.debug("auto-map: %d/%d headers mapped", len(mappings), len(headers))
    return mappings
