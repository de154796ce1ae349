"""Smart comment and omission tests."""

import pytest

from pyconnfilter.catalog import PgProc
from pyconnfilter.tags import is_omitted, parse_smart_comment


def _proc(**tags):
    return PgProc(id="1", name="f", namespace_id="1", return_type_id="25", tags=tags)


class TestParseSmartComment:
    def test_none(self):
        smart = parse_smart_comment(None)
        assert smart.tags == {}
        assert smart.description == ""

    def test_description_only(self):
        assert parse_smart_comment("Full name of the post author.").description == (
            "Full name of the post author."
        )

    def test_tags_then_description(self):
        smart = parse_smart_comment("@filterable\n@fieldName authorName\nAuthor name.")
        assert smart.tags == {"filterable": True, "fieldName": "authorName"}
        assert smart.description == "Author name."

    def test_repeated_tag(self):
        smart = parse_smart_comment("@omit filter\n@omit execute")
        assert smart.tags == {"omit": ["filter", "execute"]}

    def test_repeated_tag_three_times(self):
        smart = parse_smart_comment("@x a\n@x b\n@x c")
        assert smart.tags == {"x": ["a", "b", "c"]}

    def test_tags_only_at_top(self):
        smart = parse_smart_comment("Description first.\n@filterable")
        assert smart.tags == {}
        assert smart.description == "Description first.\n@filterable"

    def test_windows_newlines(self):
        smart = parse_smart_comment("@filterable\r\nText")
        assert smart.tags == {"filterable": True}
        assert smart.description == "Text"


class TestIsOmitted:
    def test_untagged(self):
        assert not is_omitted(_proc(), "filter")

    def test_bare_omit_omits_everything(self):
        assert is_omitted(_proc(omit=True), "filter")
        assert is_omitted(_proc(omit=True), "execute")

    @pytest.mark.parametrize("value", ["filter", "F", "read, filter", "R,F", ["order", "filter"]])
    def test_omitted_for_filter(self, value):
        assert is_omitted(_proc(omit=value), "filter")

    @pytest.mark.parametrize("value", ["order", "O", "read,execute"])
    def test_not_omitted_for_filter(self, value):
        assert not is_omitted(_proc(omit=value), "filter")

    def test_entity_without_tags(self):
        assert not is_omitted(object(), "filter")
