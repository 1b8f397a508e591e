# marketsim/choice_resolver.py
# Maps a player's typed move to an option code (code shape -> exact code -> title -> keywords).

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .catalog import Catalog, Option, flatten_catalog, is_code_shaped

logger = logging.getLogger("ChoiceResolver")

_NON_WORD = re.compile(r"\W+", re.ASCII)


@dataclass(frozen=True)
class ResolutionResult:
    chosen_option: Optional[str] = None
    explanation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"chosenOption": self.chosen_option, "explanation": self.explanation}


NO_MATCH = ResolutionResult()


def _tokens(text: str) -> List[str]:
    return [w for w in _NON_WORD.split(text.lower()) if w]


def _exact_code(choice: str, opts: List[Option]) -> Optional[ResolutionResult]:
    for o in opts:
        if o.code.lower() == choice:
            return ResolutionResult(o.code, f"Input matched option code {o.code}.")
    return None


def _title_substring(choice: str, opts: List[Option]) -> Optional[ResolutionResult]:
    for o in opts:
        title = o.title.lower()
        if not title:
            continue
        if title in choice or choice in title:
            return ResolutionResult(
                o.code,
                f'Mapped your custom input to {o.code} because it mentions "{o.title}".',
            )
    return None


def _keyword_overlap(choice: str, opts: List[Option]) -> Optional[ResolutionResult]:
    words = _tokens(choice)
    if not words:
        return None
    best: Optional[Option] = None
    best_count = 0
    for o in opts:
        title_words = set(_tokens(o.title))
        count = sum(1 for w in words if w in title_words)
        # strictly greater: first option in catalog order keeps ties
        if count > best_count:
            best, best_count = o, count
    if best is None:
        return None
    return ResolutionResult(
        best.code,
        f"Mapped your custom input to {best.code} by matching keywords in the option title.",
    )


def resolve(raw_choice: Any, catalog: Optional[Catalog]) -> ResolutionResult:
    """
    Resolve free text against the catalog. Never raises.

    A code-shaped input ("P1", "z9") is accepted as-is without checking the
    catalog and carries no explanation; otherwise the first of exact code,
    title substring and keyword overlap that hits decides.
    """
    text = "" if raw_choice is None else str(raw_choice)
    trimmed = text.strip()

    if is_code_shaped(trimmed):
        logger.debug("choice %r is code-shaped; passing through", trimmed)
        return ResolutionResult(trimmed, None)

    choice = trimmed.lower()
    if not choice:
        return NO_MATCH

    # an option without a code can never be chosen
    opts = [o for o in flatten_catalog(catalog) if o.code]
    for step in (_exact_code, _title_substring, _keyword_overlap):
        result = step(choice, opts)
        if result is not None:
            logger.debug("choice %r resolved by %s -> %s", trimmed, step.__name__, result.chosen_option)
            return result

    logger.debug("choice %r did not map to any option", trimmed)
    return NO_MATCH
