from portal_chat.utils.sanitizer import sanitize_text


class TestSanitizeText:
    def test_strips_surrounding_whitespace(self):
        assert sanitize_text("  hello there  ") == "hello there"

    def test_removes_control_characters(self):
        assert sanitize_text("hi\x00 there\x07") == "hi there"

    def test_newlines_and_tabs_are_control_characters(self):
        assert sanitize_text("line one\nline two\ttab") == "line oneline twotab"

    def test_only_controls_becomes_empty(self):
        assert sanitize_text("\x01\x02 \n ") == ""

    def test_non_string_becomes_empty(self):
        assert sanitize_text(None) == ""
        assert sanitize_text(42) == ""

    def test_unicode_is_kept(self):
        assert sanitize_text("Hej från Kungälv 👋") == "Hej från Kungälv 👋"

    def test_strips_byte_order_marks_at_the_edges(self):
        assert sanitize_text("\ufeff hi there \ufeff") == "hi there"

    def test_inner_byte_order_mark_is_kept(self):
        assert sanitize_text("hi\ufeffthere") == "hi\ufeffthere"
