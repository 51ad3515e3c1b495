from contacts_merger.utils.string import (
    normalize_address,
    normalize_email,
    normalize_name,
    normalize_phone,
)
from contacts_merger.utils.similarity import levenshtein_distance, round_half_up, similarity


def test_normalize_name():
    assert normalize_name("  John   SMITH ") == "john smith"
    assert normalize_name("John O'Brien-Smith") == "john obriensmith"
    assert normalize_name("José_García") == "joségarcía"
    assert normalize_name("") == ""
    assert normalize_name(None) == ""


def test_normalize_phone():
    assert normalize_phone("+1 (415) 555-0123") == "14155550123"
    assert normalize_phone("ext. 12") == "12"
    assert normalize_phone("call me") == ""
    assert normalize_phone(None) == ""


def test_normalize_email():
    assert normalize_email("  Jane@Example.COM ") == "jane@example.com"
    assert normalize_email(None) == ""


def test_normalize_address():
    assert normalize_address("1 Main St.,  Springfield") == normalize_address("1 main st springfield")
    assert normalize_address(None) == ""


def test_levenshtein_distance():
    assert levenshtein_distance("kitten", "sitting") == 3
    assert levenshtein_distance("", "abc") == 3
    assert levenshtein_distance("abc", "") == 3
    assert levenshtein_distance("same", "same") == 0
    assert levenshtein_distance("flaw", "lawn") == 2


def test_similarity_identical():
    assert similarity("Jane Doe", "Jane Doe") == 100
    assert similarity("x", "x") == 100
    assert similarity("", "") == 100
    assert similarity(None, "") == 100


def test_similarity_ignores_case_and_whitespace():
    assert similarity("John Smith", "john   smith") == 100
    assert similarity("John Smith!", " JOHN SMITH") == 100


def test_similarity_one_deletion():
    # distance 1 over 14 characters
    assert similarity("Robert Johnson", "Robert Jonson") == 93


def test_similarity_bounds():
    assert similarity("abc", "xyz") == 0
    assert similarity("abc", "") == 0
    assert 0 <= similarity("Ann", "Anne") <= 100
    assert similarity("Ann", "Anne") == 75


def test_similarity_is_symmetric():
    assert similarity("Jon Snow", "John Snow") == similarity("John Snow", "Jon Snow")


def test_round_half_up():
    assert round_half_up(92.5) == 93
    assert round_half_up(92.49) == 92
    assert round_half_up(0.5) == 1


def test_similarity_uses_edit_distance():
    # distance 3 over 7 characters
    assert similarity("kitten", "sitting") == 57
    assert levenshtein_distance("robert johnson", "robert jonson") == 1
