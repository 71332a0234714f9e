"""Unit tests for the HTML sanitiser.

Covers the regex stylesheet pass, noise element removal, whitespace
collapsing and the guarantee that the input document is left untouched.
"""

from __future__ import annotations

from bs4 import BeautifulSoup

from page_extractor.scraper.sanitizer import parse_html, sanitize_document, strip_stylesheets

_NOISY_HTML = """
<html>
<head><title>Noisy</title></head>
<body>
  <div id="cookie-notice">We use cookies</div>
  <div class="cookie-banner">Accept all</div>
  <div class="popup"><div class="ad">Nested advert</div></div>
  <p>Keep    this\t\ttext.</p>
  <span aria-hidden="true">decorative</span>
  <img src="/a.png" alt="picture">
  <svg><circle r="1"></circle></svg>
  <video src="/clip.mp4"></video>
  <iframe src="https://ads.example.com"></iframe>
  <div class="newsletter-signup">Subscribe now</div>
  <script>var x = 1;</script>
  <!-- a    comment -->
</body>
</html>
"""


class TestStripStylesheets:
    def test_removes_stylesheet_links(self) -> None:
        html = '<head><link rel="stylesheet" href="/a.css"><link rel="icon" href="/f.ico"></head>'
        cleaned = strip_stylesheets(html)
        assert "a.css" not in cleaned
        assert "f.ico" in cleaned

    def test_removes_style_blocks_case_insensitively(self) -> None:
        html = "<STYLE type='text/css'>\nbody { color: red; }\n</STYLE><p>text</p>"
        assert strip_stylesheets(html) == "<p>text</p>"

    def test_leaves_plain_html_alone(self) -> None:
        html = "<p>No styles here.</p>"
        assert strip_stylesheets(html) == html


class TestParseHtml:
    def test_parse_drops_styles_before_parsing(self) -> None:
        document = parse_html("<html><head><style>p{}</style></head><body><p>x</p></body></html>")
        assert document.find("style") is None
        assert document.find("p").get_text() == "x"


class TestSanitizeDocument:
    def test_removes_noise_elements(self) -> None:
        cleaned = sanitize_document(parse_html(_NOISY_HTML))
        text = cleaned.get_text()

        for tag in ("script", "img", "svg", "video", "iframe"):
            assert cleaned.find(tag) is None, tag
        assert "We use cookies" not in text
        assert "Accept all" not in text
        assert "Nested advert" not in text
        assert "decorative" not in text
        assert "Subscribe now" not in text

    def test_keeps_content_and_collapses_whitespace(self) -> None:
        cleaned = sanitize_document(parse_html(_NOISY_HTML))
        assert cleaned.find("p").get_text() == "Keep this text."

    def test_line_breaks_in_text_nodes_survive(self) -> None:
        cleaned = sanitize_document(parse_html("<body><pre>line one\n\nline  two</pre></body>"))
        assert cleaned.find("pre").get_text() == "line one\n\nline two"

    def test_comments_are_not_rewritten(self) -> None:
        cleaned = sanitize_document(parse_html(_NOISY_HTML))
        assert "a    comment" in str(cleaned)

    def test_input_document_is_not_modified(self) -> None:
        document = parse_html(_NOISY_HTML)
        before = str(document)
        sanitize_document(document)
        assert str(document) == before
        assert document.find("script") is not None

    def test_document_without_body(self) -> None:
        cleaned = sanitize_document(BeautifulSoup("<p>a   b</p><script>x</script>", "html.parser"))
        assert cleaned.find("script") is None
        assert cleaned.get_text() == "a b"
