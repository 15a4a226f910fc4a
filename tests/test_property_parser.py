"""Tests for property literal parsing."""

import pytest

from walgraph.exceptions import ParseError
from walgraph.query.properties import coerce_value, parse_properties, split_entries


class TestSplitEntries:
    """Test comma splitting with quote tracking."""

    def test_commas_inside_quotes_are_kept(self):
        assert split_entries('name: "a, b", age: 5') == ['name: "a, b"', "age: 5"]

    def test_single_quotes(self):
        assert split_entries("name: 'x, y, z', n: 1") == ["name: 'x, y, z'", "n: 1"]

    def test_other_quote_kind_inside_string(self):
        assert split_entries("""quote: "it's, fine", n: 1""") == ['''quote: "it's, fine"''', "n: 1"]

    def test_empty_entries_dropped(self):
        assert split_entries("a: 1, , b: 2,") == ["a: 1", "b: 2"]

    def test_unbalanced_quote_raises(self):
        with pytest.raises(ParseError):
            split_entries('name: "Alice, age: 30')


class TestCoerceValue:
    """Test value coercion order."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ('"Alice"', "Alice"),
            ("'Alice'", "Alice"),
            ('"30"', "30"),
            ("30", 30),
            ("0", 0),
            ("3.14", 3.14),
            ("true", True),
            ("false", False),
            ("null", None),
            ("Berlin", "Berlin"),
            ("-5", "-5"),
            ("1e3", "1e3"),
            (".5", ".5"),
            ("True", "True"),
        ],
    )
    def test_coercion(self, text, expected):
        value = coerce_value(text)
        assert value == expected
        assert type(value) is type(expected)


class TestParseProperties:
    """Test whole-literal parsing."""

    def test_basic_literal(self):
        props = parse_properties('{name: "Alice", age: 30, score: 9.5, active: true, manager: null}')
        assert props == {"name": "Alice", "age": 30, "score": 9.5, "active": True, "manager": None}

    def test_integer_stays_integer(self):
        """Already-numeric text is never left as a string."""
        props = parse_properties('{age: 30, "years": 30}')
        assert props["age"] == 30
        assert isinstance(props["age"], int)
        assert isinstance(props['"years"'], int)

    def test_quoted_keys_kept_verbatim(self):
        # Keys are only trimmed, never unquoted
        assert parse_properties('{"age": 30}') == {'"age"': 30}

    def test_comma_inside_string_value(self):
        props = parse_properties('{name: "a, b", age: 5}')
        assert props == {"name": "a, b", "age": 5}
        assert len(props) == 2

    @pytest.mark.parametrize("literal", ["{}", "{   }", "", "   "])
    def test_empty_literal(self, literal):
        assert parse_properties(literal) == {}

    def test_entries_without_colon_are_skipped(self):
        """Malformed entries are dropped instead of failing the literal."""
        assert parse_properties("{name: Alice, oops, age: 3}") == {"name": "Alice", "age": 3}

    def test_entry_with_empty_key_is_skipped(self):
        assert parse_properties("{: 1, a: 2}") == {"a": 2}

    def test_value_split_on_first_colon(self):
        assert parse_properties('{time: "10:30", url: http://x}') == {"time": "10:30", "url": "http://x"}

    def test_whitespace_tolerant(self):
        assert parse_properties("{  name :   'Bob'  ,age:7}") == {"name": "Bob", "age": 7}

    def test_unbalanced_quotes_raise(self):
        with pytest.raises(ParseError):
            parse_properties('{name: "Alice}')
