# marketsim/catalog.py
# Option catalog: default 4P table, JSON loading, flattening, validation.

from __future__ import annotations

import json
import logging
import re
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

logger = logging.getLogger("Catalog")

# one ASCII letter followed by one or more ASCII digits
CODE_PATTERN = re.compile(r"[A-Za-z][0-9]+")

Catalog = Mapping[str, Sequence[Any]]


@dataclass(frozen=True)
class Option:
    code: str
    title: str
    category: str = ""
    effects: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "title": self.title, "effects": self.effects}


_DEFAULT_ROWS = [
    ("Product", "P1", "Seasonal drink", "−$100, +L+3, +S+2%"),
    ("Product", "P2", "Vegan pastry", "−$80, +L+2, +S+1%"),
    ("Price", "R1", "Discount coffee", "+$60, +S+2%"),
    ("Price", "R2", "Premium pricing", "+$80, −L−1, −S−1%"),
    ("Place", "M1", "Pop-up near stadium", "−$90, +S+3%"),
    ("Place", "M2", "Mobile order station", "−$60, +L+1, +S+1%"),
    ("Promotion", "O1", "Instagram ads", "−$50, +L+2, +S+1%"),
    ("Promotion", "O2", "Sponsor club event", "−$70, +L+3, +S+1%"),
]


def is_code_shaped(text: str) -> bool:
    return CODE_PATTERN.fullmatch(text or "") is not None


def _field(entry: Any, name: str) -> str:
    """Read a field from an Option or a decoded JSON mapping; missing -> ""."""
    if isinstance(entry, Option):
        value = getattr(entry, name)
    elif isinstance(entry, Mapping):
        value = entry.get(name)
    else:
        value = None
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def default_catalog() -> Dict[str, List[Option]]:
    out: Dict[str, List[Option]] = {}
    for category, code, title, effects in _DEFAULT_ROWS:
        out.setdefault(category, []).append(Option(code, title, category, effects))
    return out


def flatten_catalog(catalog: Optional[Catalog]) -> List[Option]:
    """
    Categories in catalog order, then options in list order.
    Entries may be Option objects or plain dicts; the category always comes from the key.
    """
    flat: List[Option] = []
    if not isinstance(catalog, Mapping):
        return flat
    for category, entries in catalog.items():
        if not isinstance(entries, (list, tuple)):
            continue
        for entry in entries:
            flat.append(Option(
                code=_field(entry, "code"),
                title=_field(entry, "title"),
                category=str(category),
                effects=_field(entry, "effects"),
            ))
    return flat


def catalog_from_dict(data: Mapping[str, Any]) -> Dict[str, List[Option]]:
    out: Dict[str, List[Option]] = {}
    for category, entries in (data or {}).items():
        if not isinstance(entries, list):
            continue
        out[str(category)] = [
            Option(_field(e, "code"), _field(e, "title"), str(category), _field(e, "effects"))
            for e in entries
        ]
    return out


def catalog_to_dict(catalog: Optional[Catalog]) -> Dict[str, List[Dict[str, str]]]:
    out: Dict[str, List[Dict[str, str]]] = {}
    for opt in flatten_catalog(catalog):
        out.setdefault(opt.category, []).append(opt.to_dict())
    # keep empty categories visible
    for category in (catalog if isinstance(catalog, Mapping) else {}):
        out.setdefault(str(category), [])
    return out


def load_catalog(path: Optional[str | Path]) -> Dict[str, List[Option]]:
    if not path:
        return default_catalog()
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Catalog %s unreadable (%s); using default catalog", p, e)
        return default_catalog()
    if not isinstance(data, dict) or not data:
        logger.warning("Catalog %s is not a non-empty object; using default catalog", p)
        return default_catalog()
    catalog = catalog_from_dict(data)
    logger.info("Loaded catalog from %s (%d options)", p, len(flatten_catalog(catalog)))
    return catalog


def validate_catalog(catalog: Optional[Catalog]) -> List[str]:
    errors: List[str] = []
    if not isinstance(catalog, Mapping):
        return ["Catalog must be a mapping of category -> options"]

    for category, entries in catalog.items():
        if entries is not None and not isinstance(entries, (list, tuple)):
            errors.append(f"Category '{category}' must be a list of options")
        elif not entries:
            errors.append(f"Category '{category}' has no options")

    flat = flatten_catalog(catalog)
    for i, opt in enumerate(flat):
        label = opt.code or f"#{i}"
        if not opt.code:
            errors.append(f"Option {label} in '{opt.category}' is missing 'code'")
        elif not is_code_shaped(opt.code):
            errors.append(f"Option code '{opt.code}' must be a letter followed by digits")
        if not opt.title.strip():
            errors.append(f"Option {label} in '{opt.category}' is missing 'title'")

    dups = [c for c, n in Counter(o.code.lower() for o in flat if o.code).items() if n > 1]
    if dups:
        errors.append(f"Duplicate option codes: {sorted(dups)}")
    return errors
