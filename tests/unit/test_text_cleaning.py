"""
Tests for text helpers: whitespace cleanup, HTML conversion, remote terms, dates
"""

from datetime import datetime, timezone

from job_ingest.utils.text_cleaning import (
    clean_text,
    has_remote_term,
    html_to_text,
    nested_text,
    parse_datetime,
    strip_tags,
)


class TestCleanText:
    def test_collapses_whitespace(self):
        assert clean_text("  Senior \n\t Engineer  ") == "Senior Engineer"

    def test_none_is_empty(self):
        assert clean_text(None) == ""


class TestStripTags:
    def test_removes_highlight_tags(self):
        assert strip_tags("Vaga para <strong>Python</strong> dev") == "Vaga para Python dev"

    def test_removes_unclosed_tag(self):
        assert strip_tags("Python <br") == "Python"


class TestNestedText:
    def test_reads_nested_field(self):
        record = {"company": {"display_name": "  Globex  "}}
        assert nested_text(record, "company", "display_name") == "Globex"

    def test_non_object_container(self):
        assert nested_text({"location": "Remote"}, "location", "name") is None

    def test_missing_or_non_string_value(self):
        assert nested_text({}, "location", "name") is None
        assert nested_text({"location": {"name": ["a", "b"]}}, "location", "name") is None
        assert nested_text({"location": {"name": "   "}}, "location", "name") is None


class TestHtmlToText:
    def test_converts_paragraphs_and_lists(self):
        text = html_to_text("<p>About us</p><ul><li>Python</li><li>SQL</li></ul>")
        assert "About us" in text
        assert "Python" in text
        assert "SQL" in text
        assert "<" not in text

    def test_unescapes_double_escaped_markup(self):
        text = html_to_text("&lt;p&gt;Hello &amp;amp; welcome&lt;/p&gt;", unescape=True)
        assert "Hello" in text
        assert "<p>" not in text

    def test_empty(self):
        assert html_to_text(None) == ""
        assert html_to_text("") == ""


class TestHasRemoteTerm:
    def test_matches_english_and_portuguese(self):
        assert has_remote_term("Fully remote position")
        assert has_remote_term(None, "Trabalho 100% remoto")
        assert has_remote_term("Home Office")

    def test_no_match(self):
        assert not has_remote_term("On-site in Campinas", None)

    def test_all_empty(self):
        assert not has_remote_term(None, "")


class TestParseDatetime:
    def test_iso_with_z(self):
        assert parse_datetime("2024-05-01T10:00:00Z") == datetime(
            2024, 5, 1, 10, 0, tzinfo=timezone.utc
        )

    def test_iso_without_timezone(self):
        assert parse_datetime("2024-05-01T10:00:00") == datetime(2024, 5, 1, 10, 0)

    def test_epoch_milliseconds(self):
        assert parse_datetime(1714557600000) == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_date_prefix_fallback(self):
        parsed = parse_datetime("2024-05-01T10:00:00.123456789Z")
        assert parsed is not None
        assert parsed.date().isoformat() == "2024-05-01"

    def test_unparseable_is_none(self):
        assert parse_datetime("last week") is None
        assert parse_datetime(None) is None
        assert parse_datetime("") is None
