from __future__ import annotations

import re

import pytest

from saasdir.domain.slugs import create_product_slug, generate_slug, generate_unique_slug


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Hello World", "hello-world"),
        ("Hello, World!", "hello-world"),
        ("  My   AI -- Tool  ", "my-ai-tool"),
        ("---edge---", "edge"),
        ("ChatGPT 4.0 Turbo", "chatgpt-40-turbo"),
        ("Café Über", "caf-ber"),
        ("!!!", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_generate_slug(text, expected):
    assert generate_slug(text) == expected


def test_generate_slug_output_alphabet_and_idempotence():
    samples = ["Hello World", " a--b  c ", "Ünïcödé & Co.", "x_y_z", "Tab\tSeparated\nLines"]
    for sample in samples:
        slug = generate_slug(sample)
        assert re.fullmatch(r"[a-z0-9-]*", slug)
        assert not slug.startswith("-") and not slug.endswith("-")
        assert "--" not in slug
        assert generate_slug(slug) == slug


def test_underscores_are_dropped_not_separators():
    assert generate_slug("snake_case_name") == "snakecasename"


def test_unique_slug_returns_base_when_free():
    assert generate_unique_slug("foo", ["bar", "baz"]) == "foo"


def test_unique_slug_appends_counter_without_separator():
    assert generate_unique_slug("foo", ["foo"]) == "foo1"
    assert generate_unique_slug("foo", ["foo", "foo1", "foo2"]) == "foo3"


def test_unique_slug_fills_first_gap():
    assert generate_unique_slug("foo", ["foo", "foo2"]) == "foo1"


def test_unique_slug_accepts_any_iterable():
    assert generate_unique_slug("foo", iter(["foo"])) == "foo1"
    assert generate_unique_slug("foo", {"foo", "foo1"}) == "foo2"


def test_create_product_slug_combines_both_steps():
    assert create_product_slug("Hello World", ["hello-world"]) == "hello-world1"
    assert create_product_slug("Hello World") == "hello-world"


def _taken_sets():
    yield "foo", set()
    yield "foo", {"foo"}
    for n in (1, 2, 5, 12, 40):
        yield "foo", {"foo"} | {f"foo{i}" for i in range(1, n + 1)}
    for gap in (1, 3, 9, 10):
        yield "foo", {"foo"} | {f"foo{i}" for i in range(1, 15) if i != gap}
    yield "foo", {"foo", "foo10", "foo11", "bar", "foo-1"}
    yield "foo", {f"foo{i}" for i in range(1, 6)}
    yield "", {"", "1", "2"}
    yield "hello-world", {"hello-world", "hello-world1", "hello-world-2", "hello-world3"}


@pytest.mark.parametrize("base, taken", list(_taken_sets()))
def test_unique_slug_is_never_taken(base, taken):
    result = generate_unique_slug(base, taken)
    assert result not in taken
    assert result.startswith(base)
    assert result == base or result[len(base):].isdigit()
