"""Tests for relevance scoring and text matching."""

import pytest

from contract_search.search.scoring import (
    calculate_search_score,
    matches_query,
    searchable_values,
    stringify_amount,
)


class TestCalculateSearchScore:
    def test_contract_name_match_counts_twice(self):
        """Field weight plus the generic bonus for the same field: 10 + 2."""
        assert calculate_search_score({"contractName": "Acme"}, "acme") == 12

    def test_name_and_vendor(self):
        record = {"name": "Acme IT Services", "vendor": "Acme Corp"}
        # name 10 + vendor 8 + generic 2 + 2
        assert calculate_search_score(record, "acme") == 22

    def test_contract_name_and_name_both_count(self):
        record = {"contractName": "Acme Deal", "name": "acme.pdf"}
        assert calculate_search_score(record, "acme") == 24

    def test_contract_number_has_no_generic_bonus(self):
        assert calculate_search_score({"contractNumber": "ACME-001"}, "acme") == 8

    def test_description(self):
        assert calculate_search_score({"description": "Acme renewal"}, "acme") == 7

    def test_all_weighted_fields(self):
        record = {
            "contractName": "Acme",
            "name": "Acme",
            "vendor": "Acme",
            "contractNumber": "Acme",
            "description": "Acme",
        }
        assert calculate_search_score(record, "acme") == 10 + 10 + 8 + 8 + 5 + 4 * 2

    def test_unweighted_fields_do_not_score(self):
        record = {"department": "Acme", "status": "acme", "assignedManagers": ["acme"]}
        assert calculate_search_score(record, "acme") == 0

    def test_non_string_fields_skipped(self):
        record = {"contractName": 123, "vendor": None, "name": ["acme"]}
        assert calculate_search_score(record, "acme") == 0

    def test_case_insensitive(self):
        assert calculate_search_score({"vendor": "ACME corp"}, "AcMe") == 10

    def test_deterministic(self):
        record = {"contractName": "Acme IT", "vendor": "Acme", "description": "acme"}
        assert calculate_search_score(record, "acme") == calculate_search_score(record, "acme")

    def test_exact_name_beats_no_match(self):
        matching = {"contractName": "Acme", "department": "IT"}
        other = {"contractName": "Other", "department": "IT"}
        assert calculate_search_score(matching, "Acme") > calculate_search_score(other, "Acme")

    def test_substring_not_word_boundary(self):
        assert calculate_search_score({"contractName": "Pacmeter"}, "acme") == 12


class TestMatchesQuery:
    @pytest.mark.parametrize("record", [
        {"contractName": "Acme IT"},
        {"name": "acme.pdf"},
        {"contractNumber": "CT-ACME"},
        {"vendor": "Acme"},
        {"contractType": "acme-type"},
        {"department": "Acme"},
        {"status": "acme"},
        {"priority": "acme"},
        {"assignedManagers": ["bob", "acme.admin"]},
        {"compliance": "ACME-ISO"},
        {"compliance": ["SOC2", "acme"]},
        {"contractExpiryDate": "acme"},
    ])
    def test_declared_fields_match(self, record):
        assert matches_query(record, "acme") is True

    def test_description_is_not_searchable(self):
        assert matches_query({"description": "acme"}, "acme") is False

    def test_amount_stringified(self):
        assert matches_query({"amount": 5000}, "500") is True
        assert matches_query({"amount": 5000.0}, "5000.0") is False
        assert matches_query({"amount": 1500.5}, "1500.5") is True

    def test_expiry_date_substring(self):
        assert matches_query({"contractExpiryDate": "2025-06-30T00:00:00.000+00:00"}, "2025-06") is True

    def test_no_match(self):
        assert matches_query({"contractName": "Beta", "vendor": "Gamma"}, "acme") is False

    def test_non_string_list_items_ignored(self):
        assert matches_query({"assignedManagers": [1, None, "carol"]}, "1") is False


class TestSearchableValues:
    def test_skips_missing_and_empty(self):
        values = list(searchable_values({"contractName": "", "vendor": "Acme", "amount": None}))
        assert values == ["Acme"]

    def test_bool_amount_ignored(self):
        assert stringify_amount(True) is None

    def test_stringify_amount(self):
        assert stringify_amount(5000) == "5000"
        assert stringify_amount(5000.0) == "5000"
        assert stringify_amount(0) == "0"
        assert stringify_amount(12000.5) == "12000.5"
        assert stringify_amount("5000") is None
