"""
Unit tests for catalog parsing and queries.
"""

import json

import pytest

import catalog
import config as cfg
from calculators import CALCULATORS


# Parsing

def test_slugify():
    assert catalog.slugify("401(k) Calculator") == "401k-calculator"
    assert catalog.slugify("Health & Fitness") == "health-fitness"
    assert catalog.slugify("  Loans -- and  Debt_ ") == "loans-and-debt"


def test_parse_structure(sample_catalog):
    assert [c.name for c in sample_catalog] == ["Finance", "Health & Fitness", "Mathematics"]
    finance = sample_catalog[0]
    assert finance.slug == "finance"
    assert finance.description == "Comprehensive finance calculators and tools"
    assert finance.icon == "DollarSign"
    assert finance.color in cfg.CATALOG_COLORS
    assert [s.slug for s in finance.subcategories] == ["loans-debt", "savings"]
    assert finance.subcategories[0].description == "Loans & Debt calculators and planning tools"
    assert finance.calculator_count == 4


def test_calculator_suffix_and_attributes(sample_catalog):
    entries = {e.slug: e for e in catalog.all_calculators(sample_catalog)}
    loan = entries["loan-payment-calculator"]
    assert loan.name == "Loan Payment Calculator"
    assert loan.category == "finance"
    assert loan.subcategory == "loans-debt"
    assert loan.description == "Calculate loan payments and terms"
    assert loan.difficulty == "basic"
    assert loan.popular is True
    assert "loans & debt" in loan.tags

    amort = entries["mortgage-amortization-calculator"]
    assert amort.name == "Mortgage Amortization Calculator"
    assert amort.difficulty == "intermediate"

    assert entries["401k-calculator"].popular is True
    assert entries["bmi-calculator"].description == "Calculate body mass index"


def test_lines_outside_subcategory_are_skipped(caplog):
    text = "Orphan\nCATEGORY: Misc\nStray\nSub-category: Things\nWidget\n"
    cats = catalog.parse_catalog(text)
    assert [e.name for e in catalog.all_calculators(cats)] == ["Widget Calculator"]
    assert sum("ignored" in r.getMessage() for r in caplog.records) == 2


def test_empty_text():
    assert catalog.parse_catalog("\n\n") == []


def test_load_catalog_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        catalog.load_catalog(str(tmp_path / "nope.txt"))


def test_load_catalog_from_file(tmp_path, sample_text):
    path = tmp_path / "list.txt"
    path.write_text(sample_text, encoding="utf-8")
    assert len(catalog.all_calculators(catalog.load_catalog(str(path)))) == 7


# Queries

def test_search_calculators(sample_catalog):
    names = {e.name for e in catalog.search_calculators(sample_catalog, "LOAN")}
    assert names == {"Loan Payment Calculator", "Mortgage Amortization Calculator", "401(k) Calculator"}
    assert len(catalog.search_calculators(sample_catalog, "")) == 7
    assert catalog.search_calculators(sample_catalog, "zzzz") == []


def test_filter_calculators(sample_catalog):
    popular = catalog.filter_calculators(sample_catalog, category="finance", popular_only=True)
    assert [e.slug for e in popular] == ["loan-payment-calculator", "401k-calculator", "savings-goal-calculator"]
    hard = catalog.filter_calculators(sample_catalog, difficulty="intermediate")
    assert [e.slug for e in hard] == ["mortgage-amortization-calculator"]
    assert catalog.filter_calculators(sample_catalog, category="finance", query="bmi") == []


def test_search_categories(sample_catalog):
    assert [c.slug for c in catalog.search_categories(sample_catalog, "bmi")] == ["health-fitness"]
    assert [c.slug for c in catalog.search_categories(sample_catalog, "savings")] == ["finance"]
    assert catalog.search_categories(sample_catalog, "zzzz") == []
    assert len(catalog.search_categories(sample_catalog, " ")) == 3


def test_sort_categories(sample_catalog):
    assert [c.name for c in catalog.sort_categories(sample_catalog, "name")] == [
        "Finance", "Health & Fitness", "Mathematics"]
    assert [c.slug for c in catalog.sort_categories(sample_catalog, "popular")] == [
        "finance", "mathematics", "health-fitness"]
    with pytest.raises(ValueError):
        catalog.sort_categories(sample_catalog, "rating")


def test_sort_by_calculators_is_stable_and_non_increasing():
    text = (
        "CATEGORY: Alpha\nSub-category: A\nOne\n"
        "CATEGORY: Beta\nSub-category: B\nTwo\n"
        "CATEGORY: Gamma\nSub-category: C\nThree\nFour\n"
        "CATEGORY: Delta\nSub-category: D\nFive\n"
    )
    ordered = catalog.sort_categories(catalog.parse_catalog(text), "calculators")
    counts = [c.calculator_count for c in ordered]
    assert counts == sorted(counts, reverse=True)
    assert [c.name for c in ordered] == ["Gamma", "Alpha", "Beta", "Delta"]


def test_group_by_category(sample_catalog):
    groups = catalog.group_by_category(sample_catalog, catalog.all_calculators(sample_catalog))
    assert [(cat.slug, len(items)) for cat, items in groups] == [
        ("finance", 4), ("mathematics", 2), ("health-fitness", 1)]


def test_lookups(sample_catalog):
    assert catalog.get_category(sample_catalog, "mathematics").name == "Mathematics"
    assert catalog.get_category(sample_catalog, "cooking") is None
    assert catalog.get_subcategory(sample_catalog, "finance", "savings").name == "Savings"
    assert catalog.get_subcategory(sample_catalog, "finance", "body") is None
    assert catalog.get_calculator(sample_catalog, "tip-calculator").category == "mathematics"
    assert catalog.get_calculator(sample_catalog, "nope") is None


def test_catalog_to_json(sample_catalog):
    payload = json.loads(catalog.catalog_to_json(sample_catalog))
    assert [c["slug"] for c in payload["categories"]] == ["finance", "health-fitness", "mathematics"]
    assert "loan-payment-calculator" in payload["popular"]


# Shipped catalog

def test_shipped_catalog_lists_every_implemented_calculator(full_catalog):
    slugs = {e.slug for e in catalog.all_calculators(full_catalog)}
    assert set(CALCULATORS) <= slugs


def test_popular_slugs_are_capped(full_catalog):
    popular = catalog.popular_slugs(full_catalog)
    assert 0 < len(popular) <= cfg.CATALOG_POPULAR_LIMIT
    assert len(set(popular)) == len(popular)
