import pytest

from cms_snippets.models import OptionSet
from cms_snippets.value_index import extract_value_by_index, parse_index_options

FRUITS = "pomme;orange;banane;fraise"


def test_readme_scenarios() -> None:
    assert extract_value_by_index(FRUITS, "0") == "pomme"
    assert extract_value_by_index(FRUITS, "-1") == "fraise"
    assert extract_value_by_index(FRUITS, "index=1&delimiter=;") == "orange"
    assert extract_value_by_index(FRUITS, "index=10&default=Non trouvé") == "Non trouvé"


def test_custom_delimiter() -> None:
    assert extract_value_by_index("pomme|orange|banane", "index=1&delimiter=|") == "orange"


def test_empty_input_returns_empty_string_even_with_default() -> None:
    assert extract_value_by_index("", "index=3&default=fallback") == ""
    assert extract_value_by_index(None, "0") == ""


def test_empty_options_split_on_semicolon_and_trim() -> None:
    assert extract_value_by_index("  a ; b,c ;d  ", "") == "a"
    assert extract_value_by_index("  a ; b,c ;d  ", "1") == "b,c"
    assert extract_value_by_index("  a ; b,c ;d  ", None) == "a"


@pytest.mark.parametrize("k", [1, 2, 3, 4])
def test_negative_index_matches_positive_equivalent(k: int) -> None:
    count = len(FRUITS.split(";"))
    assert extract_value_by_index(FRUITS, str(-k)) == extract_value_by_index(FRUITS, str(count - k))


def test_negative_index_out_of_range_returns_default() -> None:
    assert extract_value_by_index(FRUITS, "index=-5&default=none") == "none"
    assert extract_value_by_index(FRUITS, "-5") == ""


def test_index_out_of_range_without_default_returns_empty() -> None:
    assert extract_value_by_index(FRUITS, "4") == ""


def test_numeric_options_take_precedence() -> None:
    assert parse_index_options("2") == OptionSet(index=2)
    assert parse_index_options(" 3 ") == OptionSet(index=3)
    assert parse_index_options("1.9") == OptionSet(index=1)
    assert parse_index_options(1) == OptionSet(index=1)


def test_malformed_fragment_is_ignored() -> None:
    parsed = parse_index_options("index=2&badfragment&delimiter=|")

    assert parsed.index == 2
    assert parsed.delimiter == "|"
    assert parsed.default == ""


def test_fragment_with_two_equals_signs_is_ignored() -> None:
    parsed = parse_index_options("index=1&default=a=b")

    assert parsed == OptionSet(index=1)


def test_unknown_keys_are_ignored_and_values_trimmed() -> None:
    parsed = parse_index_options(" index = 3 & colour=red & default = n/a ")

    assert parsed == OptionSet(index=3, delimiter=";", default="n/a")


def test_non_numeric_index_value_parses_leading_digits() -> None:
    assert parse_index_options("index=2abc").index == 2
    assert parse_index_options("index=abc").index == 0


def test_blank_delimiter_falls_back_to_semicolon() -> None:
    assert extract_value_by_index("a;b", "index=1&delimiter=") == "b"


def test_input_without_delimiter_is_single_value() -> None:
    assert extract_value_by_index("seul", "0") == "seul"
    assert extract_value_by_index("seul", "-1") == "seul"


@pytest.mark.parametrize(
    "options",
    [
        "&&&",
        "=",
        "index=",
        "index=&delimiter=",
        "1e400",
        "nan",
        "-",
        "index=99999999999999999999",
        "🍓=🍌",
        pytest.param("index=" + "9" * 5000, id="index-too-many-digits"),
        pytest.param("index=-" + "9" * 5000 + "&default=x", id="negative-index-too-many-digits"),
        pytest.param("9" * 5000, id="shorthand-too-many-digits"),
        pytest.param("&" * 100000, id="many-empty-fragments"),
    ],
)
def test_malformed_options_never_raise(options: str) -> None:
    result = extract_value_by_index(FRUITS, options)

    assert isinstance(result, str)


def test_index_with_too_many_digits_falls_back_to_first_value() -> None:
    assert extract_value_by_index(FRUITS, "index=" + "9" * 5000) == "pomme"
