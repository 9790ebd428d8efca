"""Tests for sanitizer.strip_shortcodes, clean_body and to_plain_text."""

from app.services.sanitizer import clean_body, strip_shortcodes, to_plain_text


class TestStripShortcodes:
    def test_strips_divi_section_tags(self):
        html = "[et_pb_section fb_built='1'][/et_pb_section]"
        assert strip_shortcodes(html) == ""

    def test_strips_self_closing_shortcode(self):
        result = strip_shortcodes("Before [gallery ids='1,2,3'] After")
        assert "[gallery" not in result
        assert "Before" in result
        assert "After" in result

    def test_no_shortcodes_unchanged(self):
        html = "<p>Regular HTML content without shortcodes.</p>"
        assert strip_shortcodes(html) == html

    def test_strips_wpbakery_shortcodes(self):
        html = "[vc_row][vc_column width='1/1']<p>Content</p>[/vc_column][/vc_row]"
        result = strip_shortcodes(html)
        assert "vc_row" not in result
        assert "<p>Content</p>" in result

    def test_uppercase_shortcode(self):
        result = strip_shortcodes("[ET_PB_SECTION]content[/ET_PB_SECTION]")
        assert "ET_PB_SECTION" not in result
        assert "content" in result


class TestCleanBody:
    def test_clean_markup_is_returned_unchanged(self):
        html = '<h2>Title</h2><p>Paragraph <a href="/x">link</a>.</p>'
        assert clean_body(html) == html

    def test_removes_script_and_comments(self):
        result = clean_body("<p>Visible</p><!-- draft note --><script>alert('x')</script>")
        assert "draft note" not in result
        assert "alert" not in result
        assert "<p>Visible</p>" in result

    def test_keeps_iframe_embeds(self):
        html = '<p>Watch:</p><iframe src="https://www.youtube.com/embed/abc"></iframe>'
        assert "youtube.com/embed/abc" in clean_body(html)

    def test_strips_event_handler_attributes(self):
        result = clean_body('<a href="/page" onclick="doSomething()">Link</a>')
        assert "onclick" not in result
        assert 'href="/page"' in result

    def test_second_pass_is_a_no_op(self):
        once = clean_body("[vc_row]<p onmouseover='x()'>Hi</p><noscript>n</noscript>[/vc_row]")
        assert clean_body(once) == once

    def test_empty_input(self):
        assert clean_body("") == ""
        assert clean_body("[et_pb_section][/et_pb_section]") == ""


class TestToPlainText:
    def test_strips_tags_and_decodes_entities(self):
        assert to_plain_text("<p>Tom &amp; Jerry&#8217;s</p>") == "Tom & Jerry’s"

    def test_collapses_whitespace(self):
        assert to_plain_text("<p>one\n\n  two</p>\n") == "one two"

    def test_plain_text_is_stable(self):
        text = to_plain_text("<p>Budget &amp; timeline</p>")
        assert to_plain_text(text) == text

    def test_blank(self):
        assert to_plain_text("   ") == ""
