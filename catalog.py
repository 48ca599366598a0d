"""
Calculator catalog: parse the plain-text category list and query it.

File format (one entry per line, surrounding whitespace ignored)::

    CATEGORY: Finance
    Sub-category: Mortgages
    Mortgage Payment
    Refinance Calculator

Lines that are neither a category nor a sub-category header name a
calculator; " Calculator" is appended when the name does not already
contain it.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import config as cfg

logger = logging.getLogger(__name__)

CATEGORY_PREFIX = "CATEGORY:"
SUBCATEGORY_PREFIX = "Sub-category:"

SORT_KEYS = ("name", "calculators", "popular")


# ─── Model ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CatalogEntry:
    name: str
    slug: str
    category: str            # category slug
    subcategory: str         # sub-category slug
    description: str
    tags: Tuple[str, ...]
    difficulty: str
    popular: bool


@dataclass(frozen=True)
class Subcategory:
    name: str
    slug: str
    description: str
    calculators: Tuple[CatalogEntry, ...]


@dataclass(frozen=True)
class Category:
    name: str
    slug: str
    description: str
    icon: str
    color: str
    subcategories: Tuple[Subcategory, ...]

    def calculators(self) -> List[CatalogEntry]:
        return [c for sub in self.subcategories for c in sub.calculators]

    @property
    def calculator_count(self) -> int:
        return sum(len(sub.calculators) for sub in self.subcategories)

    @property
    def popular_count(self) -> int:
        return sum(1 for c in self.calculators() if c.popular)


# ─── Derived attributes ──────────────────────────────────────────────

def slugify(text: str) -> str:
    """``'401(k) Calculator'`` -> ``'401k-calculator'``."""
    s = re.sub(r"[^\w\s-]", "", text.lower())
    s = re.sub(r"[\s_-]+", "-", s)
    return s.strip("-")


def _first_match(name: str, rules: Sequence[Tuple[str, str]], default: str) -> str:
    lowered = name.lower()
    for keyword, value in rules:
        if keyword in lowered:
            return value
    return default


def difficulty_for(name: str) -> str:
    return _first_match(name, cfg.CATALOG_DIFFICULTY_RULES, cfg.CATALOG_DEFAULT_DIFFICULTY)


def description_for(name: str) -> str:
    default = cfg.CATALOG_DEFAULT_DESCRIPTION.format(name=name.lower())
    return _first_match(name, cfg.CATALOG_DESCRIPTION_RULES, default)


def icon_for(category_name: str) -> str:
    return _first_match(category_name, cfg.CATALOG_ICON_RULES, cfg.CATALOG_DEFAULT_ICON)


def color_for(category_name: str) -> str:
    """Stable palette pick from the sum of character codes."""
    return cfg.CATALOG_COLORS[sum(ord(ch) for ch in category_name) % len(cfg.CATALOG_COLORS)]


def is_popular(name: str) -> bool:
    return name in cfg.POPULAR_CALCULATORS


def full_name(raw: str) -> str:
    if cfg.CATALOG_CALCULATOR_SUFFIX in raw:
        return raw
    return f"{raw} {cfg.CATALOG_CALCULATOR_SUFFIX}"


# ─── Parsing ─────────────────────────────────────────────────────────

def parse_catalog(text: str) -> List[Category]:
    """Parse catalog text into categories, preserving file order."""
    categories: List[Category] = []
    cat: Optional[dict] = None
    sub: Optional[dict] = None

    def close_sub():
        nonlocal sub
        if cat is not None and sub is not None:
            cat["subcategories"].append(Subcategory(
                name=sub["name"], slug=sub["slug"], description=sub["description"],
                calculators=tuple(sub["calculators"]),
            ))
        sub = None

    def close_cat():
        nonlocal cat
        close_sub()
        if cat is not None:
            categories.append(Category(
                name=cat["name"], slug=cat["slug"], description=cat["description"],
                icon=cat["icon"], color=cat["color"],
                subcategories=tuple(cat["subcategories"]),
            ))
        cat = None

    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line:
            continue

        if line.startswith(CATEGORY_PREFIX):
            close_cat()
            name = line[len(CATEGORY_PREFIX):].strip()
            cat = {
                "name": name,
                "slug": slugify(name),
                "description": f"Comprehensive {name.lower()} calculators and tools",
                "icon": icon_for(name),
                "color": color_for(name),
                "subcategories": [],
            }
        elif line.startswith(SUBCATEGORY_PREFIX):
            close_sub()
            if cat is None:
                logger.warning("line %d: sub-category outside any category ignored: %s", lineno, line)
                continue
            name = line[len(SUBCATEGORY_PREFIX):].strip()
            sub = {
                "name": name,
                "slug": slugify(name),
                "description": f"{name} calculators and planning tools",
                "calculators": [],
            }
        elif sub is None:
            logger.warning("line %d: calculator outside any sub-category ignored: %s", lineno, line)
        else:
            name = full_name(line)
            sub["calculators"].append(CatalogEntry(
                name=name,
                slug=slugify(name),
                category=cat["slug"],
                subcategory=sub["slug"],
                description=description_for(name),
                tags=(cat["name"].lower(), sub["name"].lower(), line.lower()),
                difficulty=difficulty_for(name),
                popular=is_popular(name),
            ))

    close_cat()
    return categories


def load_catalog(path: str = cfg.CATALOG_PATH) -> List[Category]:
    """Read and parse a catalog file. Raises ``FileNotFoundError``."""
    with open(path, encoding="utf-8") as fh:
        categories = parse_catalog(fh.read())
    logger.info("loaded %d categories / %d calculators from %s",
                len(categories), sum(c.calculator_count for c in categories), path)
    return categories


# ─── Queries ─────────────────────────────────────────────────────────

def all_calculators(categories: Sequence[Category]) -> List[CatalogEntry]:
    return [c for cat in categories for c in cat.calculators()]


def _matches(entry: CatalogEntry, q: str) -> bool:
    return (q in entry.name.lower()
            or q in entry.description.lower()
            or any(q in tag for tag in entry.tags))


def search_calculators(categories: Sequence[Category], query: str) -> List[CatalogEntry]:
    """Case-insensitive substring search over name, description and tags.

    An empty query returns every calculator; no match returns ``[]``.
    """
    q = query.strip().lower()
    entries = all_calculators(categories)
    if not q:
        return entries
    return [e for e in entries if _matches(e, q)]


def filter_calculators(
    categories: Sequence[Category],
    category: str = "",
    difficulty: str = "",
    popular_only: bool = False,
    query: str = "",
) -> List[CatalogEntry]:
    """Search plus category / difficulty / popularity filters (all ANDed)."""
    out = search_calculators(categories, query)
    if category:
        out = [e for e in out if e.category == category]
    if difficulty:
        out = [e for e in out if e.difficulty == difficulty]
    if popular_only:
        out = [e for e in out if e.popular]
    return out


def search_categories(categories: Sequence[Category], query: str) -> List[Category]:
    """Categories whose name, description, sub-categories or calculators match."""
    q = query.strip().lower()
    if not q:
        return list(categories)
    out = []
    for cat in categories:
        if (q in cat.name.lower()
                or q in cat.description.lower()
                or any(q in sub.name.lower() for sub in cat.subcategories)
                or any(q in c.name.lower() for c in cat.calculators())):
            out.append(cat)
    return out


def sort_categories(categories: Sequence[Category], key: str = "name") -> List[Category]:
    """Stable sort: ``name`` A-Z, ``calculators`` / ``popular`` count descending."""
    if key == "name":
        return sorted(categories, key=lambda c: c.name.lower())
    if key == "calculators":
        return sorted(categories, key=lambda c: c.calculator_count, reverse=True)
    if key == "popular":
        return sorted(categories, key=lambda c: c.popular_count, reverse=True)
    raise ValueError(f"Unknown sort key '{key}'; expected one of {', '.join(SORT_KEYS)}")


def group_by_category(
    categories: Sequence[Category], entries: Sequence[CatalogEntry],
) -> List[Tuple[Category, List[CatalogEntry]]]:
    """Group *entries* under their category, largest group first."""
    by_slug: Dict[str, List[CatalogEntry]] = {}
    for e in entries:
        by_slug.setdefault(e.category, []).append(e)
    groups = [(cat, by_slug[cat.slug]) for cat in categories if cat.slug in by_slug]
    return sorted(groups, key=lambda g: len(g[1]), reverse=True)


def get_category(categories: Sequence[Category], slug: str) -> Optional[Category]:
    for cat in categories:
        if cat.slug == slug:
            return cat
    return None


def get_subcategory(
    categories: Sequence[Category], category_slug: str, subcategory_slug: str,
) -> Optional[Subcategory]:
    cat = get_category(categories, category_slug)
    if cat is None:
        return None
    for sub in cat.subcategories:
        if sub.slug == subcategory_slug:
            return sub
    return None


def get_calculator(categories: Sequence[Category], slug: str) -> Optional[CatalogEntry]:
    for e in all_calculators(categories):
        if e.slug == slug:
            return e
    return None


def popular_slugs(categories: Sequence[Category]) -> List[str]:
    return [e.slug for e in all_calculators(categories) if e.popular][:cfg.CATALOG_POPULAR_LIMIT]


def catalog_to_json(categories: Sequence[Category], indent: Optional[int] = 2) -> str:
    """Serialise the parsed catalog (plus the popular list) to JSON."""
    payload = {
        "categories": [asdict(c) for c in categories],
        "popular": popular_slugs(categories),
    }
    return json.dumps(payload, indent=indent)
