"""
Link extractor tests
"""

import types

from url_crawler.crawler.parser import LinkExtractor


class TestLinkExtractor:
    def test_extracts_hrefs_in_document_order(self):
        html = """
        <html><body>
            <a href="/about">About</a>
            <p><a href="http://google.com">Google</a></p>
            <a href="contact">Contact</a>
        </body></html>
        """
        assert list(LinkExtractor().extract(html)) == ["/about", "http://google.com", "contact"]

    def test_keeps_duplicates(self):
        html = '<a href="/a">1</a><a href="/b">2</a><a href="/a">3</a>'
        assert list(LinkExtractor().extract(html)) == ["/a", "/b", "/a"]

    def test_skips_anchors_without_href(self):
        html = '<a name="top">Top</a><a href="">Empty</a><a href="  ">Blank</a><a href="/x">X</a>'
        assert list(LinkExtractor().extract(html)) == ["/x"]

    def test_strips_whitespace(self):
        assert list(LinkExtractor().extract('<a href=" /about\n">About</a>')) == ["/about"]

    def test_ignores_non_anchor_links(self):
        html = '<link href="/style.css" rel="stylesheet"><img src="/logo.png"><a href="/page">P</a>'
        assert list(LinkExtractor().extract(html)) == ["/page"]

    def test_empty_body_yields_nothing(self):
        assert list(LinkExtractor().extract("")) == []

    def test_plain_text_yields_nothing(self):
        assert list(LinkExtractor().extract("just some text")) == []

    def test_returns_lazy_iterator(self):
        links = LinkExtractor().extract('<a href="/a">A</a>')
        assert isinstance(links, types.GeneratorType)
        assert next(links) == "/a"

    def test_restartable_per_call(self):
        extractor = LinkExtractor()
        html = '<a href="/a">A</a>'
        assert list(extractor.extract(html)) == ["/a"]
        assert list(extractor.extract(html)) == ["/a"]

    def test_html_parser_backend(self):
        extractor = LinkExtractor(features='html.parser')
        assert list(extractor.extract('<a href="/a">A</a>')) == ["/a"]
