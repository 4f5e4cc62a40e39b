"""Unit tests for sources (text, HTML and PDF readers)."""

from __future__ import annotations

import fitz
import pytest
import requests

from sources import html_text
from sources.html_text import fetch_html_text, html_to_text
from sources.loader import UnsupportedDocumentError, load_document
from sources.pdf_text import extract_pdf_text
from sources.text_cleaner import block_text, clean_block_text, collect_repeated_texts, join_blocks

PAGE = """
<html>
  <head><title>Guide</title><style>p { color: red; }</style></head>
  <body>
    <h1>Installation</h1>
    <div><p>Le tableau doit être accessible.</p></div>
    <ul><li>Disjoncteur</li><li>Interrupteur</li></ul>
    <h4>Détail</h4>
    <script>track();</script>
  </body>
</html>
"""


def _block(text: str, y0: float, y1: float, page_height: float = 800.0) -> dict:
    return {
        "type": 0,
        "bbox": (50.0, y0, 500.0, y1),
        "page_height": page_height,
        "lines": [{"spans": [{"text": line}]} for line in text.split("\n")],
    }


class TestHtmlToText:
    def test_blocks_to_lines(self):
        assert html_to_text(PAGE).splitlines() == [
            "# Installation",
            "Le tableau doit être accessible.",
            "- Disjoncteur",
            "- Interrupteur",
            "### Détail",
        ]

    def test_fragment_without_body(self):
        assert html_to_text("<p>Seul</p>") == "Seul"


class _FakeResponse:
    def __init__(self, text: str, status: int = 200) -> None:
        self.text = text
        self.status = status
        self.encoding = None
        self.apparent_encoding = "utf-8"

    def raise_for_status(self) -> None:
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} Error")


class TestFetchHtml:
    def test_fetch(self, monkeypatch):
        calls = []

        def fake_get(url, timeout, headers):
            calls.append((url, timeout))
            return _FakeResponse(PAGE)

        monkeypatch.setattr(html_text.requests, "get", fake_get)
        text = fetch_html_text("https://exemple.sn/guide", timeout=5)
        assert text.startswith("# Installation")
        assert calls == [("https://exemple.sn/guide", 5)]

    def test_http_error_propagates(self, monkeypatch):
        monkeypatch.setattr(html_text.requests, "get", lambda url, timeout, headers: _FakeResponse("", 404))
        with pytest.raises(requests.HTTPError):
            fetch_html_text("https://exemple.sn/absent")


class TestLoadDocument:
    def test_text_and_markdown(self, tmp_path):
        (tmp_path / "a.txt").write_text("# Titre\ncorps", encoding="utf-8")
        (tmp_path / "b.MD").write_text("## Sous-titre", encoding="utf-8")
        assert load_document(tmp_path / "a.txt") == "# Titre\ncorps"
        assert load_document(str(tmp_path / "b.MD")) == "## Sous-titre"

    def test_html(self, tmp_path):
        path = tmp_path / "page.html"
        path.write_text(PAGE, encoding="utf-8")
        assert load_document(path).startswith("# Installation\n")

    def test_unsupported(self, tmp_path):
        path = tmp_path / "note.docx"
        with pytest.raises(UnsupportedDocumentError) as exc:
            load_document(path)
        assert exc.value.path == path
        assert ".docx" in str(exc.value)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_document(tmp_path / "absent.txt")


class TestPdf:
    def test_heading_body_and_page_number(self, tmp_path):
        path = tmp_path / "guide.pdf"
        doc = fitz.open()
        page = doc.new_page()
        page.insert_text((72, 100), "Mise en service", fontsize=22)
        page.insert_text((72, 200), "Le circuit est vérifié avant usage.", fontsize=11)
        page.insert_text((72, 400), "Chaque prise est testée.", fontsize=11)
        page.insert_text((300, 600), "12", fontsize=11)
        doc.save(str(path))
        doc.close()

        text = extract_pdf_text(path)
        lines = [line for line in text.splitlines() if line]
        assert lines[0] == "# Mise en service"
        assert "Le circuit est vérifié avant usage." in lines
        assert "12" not in lines
        assert load_document(path) == text


class TestTextCleaner:
    def test_block_text(self):
        assert block_text(_block("un\ndeux", 100, 120)) == "un\ndeux"

    def test_repeated_margin_text(self):
        pages = [
            [_block("Norme NS 01-001", 10, 30), _block("Corps A", 300, 320)],
            [_block("Norme NS 01-001", 10, 30), _block("Corps B", 300, 320)],
        ]
        assert collect_repeated_texts(pages) == {"Norme NS 01-001"}

    def test_single_page_header_kept(self):
        assert collect_repeated_texts([[_block("En-tête", 10, 30)]]) == set()

    def test_clean_block(self):
        assert clean_block_text(_block("instal-\nlation  électrique", 100, 120), set()) == "installation électrique"
        assert clean_block_text(_block("Page 3", 100, 120), set()) is None
        assert clean_block_text(_block("4 / 12", 100, 120), set()) is None
        assert clean_block_text(_block("répété", 10, 20), {"répété"}) is None
        assert clean_block_text({"type": 1, "bbox": (0, 0, 1, 1)}, set()) is None

    def test_join_blocks(self):
        assert join_blocks(["a", "b", "c"], [20.0, 2.0]) == "a\n\nb\nc"
        assert join_blocks([], []) == ""
