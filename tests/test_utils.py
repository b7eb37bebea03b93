"""Tests for slug helpers"""

from lib.utils import MAX_SLUG_LENGTH, generate_unique_slug, slugify


class TestSlugify:
    def test_basic_title(self):
        assert slugify("Hello World") == "hello-world"

    def test_punctuation_collapses_to_single_hyphen(self):
        assert slugify("C# 10 Features: Pattern Matching+") == "c-10-features-pattern-matching"

    def test_diacritics_are_transliterated(self):
        assert slugify("Café Münchën") == "cafe-munchen"

    def test_leading_and_trailing_hyphens_trimmed(self):
        assert slugify("--Leading and Trailing--") == "leading-and-trailing"

    def test_empty_and_symbol_only_input(self):
        assert slugify("") == ""
        assert slugify(None) == ""
        assert slugify("!!!@@@") == ""

    def test_long_titles_are_truncated(self):
        slug = slugify("word " * 100)
        assert len(slug) <= MAX_SLUG_LENGTH
        assert not slug.endswith("-")


class TestGenerateUniqueSlug:
    def test_free_slug_is_returned_as_is(self):
        assert generate_unique_slug("My Post", set()) == "my-post"

    def test_taken_slug_gets_numeric_suffix(self):
        assert generate_unique_slug("My Post", {"my-post"}) == "my-post-2"

    def test_suffix_keeps_counting(self):
        assert generate_unique_slug("my-post", {"my-post", "my-post-2", "my-post-3"}) == "my-post-4"

    def test_empty_text_falls_back_to_default(self):
        assert generate_unique_slug("???", set()) == "post"
        assert generate_unique_slug("", set()) == "post"

    def test_default_slug_is_counted_when_taken(self):
        assert generate_unique_slug("!!!", {"post"}) == "post-2"

    def test_reserved_words_are_qualified(self):
        assert generate_unique_slug("RSS", set()) == "rss-post"
        assert generate_unique_slug("Admin", set()) == "admin-post"
