"""sources/html_text.py — conversion d'une page HTML en texte pour le segmenteur."""

from __future__ import annotations

import logging

import requests
from bs4 import BeautifulSoup, Tag

log = logging.getLogger(__name__)

_HEADING_LEVEL: dict[str, int] = {"h1": 1, "h2": 2, "h3": 3, "h4": 3, "h5": 3, "h6": 3}
_BLOCK_TAGS: set[str] = {
    "div", "p", "article", "section", "main", "aside", "nav",
    "header", "footer", "blockquote",
    "li", "ul", "ol",
    "td", "th", "tr", "table",
    "form", "fieldset", "details", "summary",
} | set(_HEADING_LEVEL)

# Balises sans contenu textuel utile
_NOISE_TAGS = ["script", "style", "noscript", "template"]

_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_TIMEOUT = 30.0


def _extract_lines(body: Tag) -> list[str]:
    """
    Parcourt le DOM et produit une ligne par bloc :
      - titre h1–h6   → "#"/"##"/"###" + texte (pas de descente dans le titre)
      - li feuille    → "- " + texte
      - bloc feuille  → texte
      - bloc conteneur (avec des enfants blocs) → descente, rien d'émis lui-même
    """
    lines: list[str] = []

    def walk(el: Tag) -> None:
        name = el.name
        if name in _HEADING_LEVEL:
            text = el.get_text(" ", strip=True)
            if text:
                lines.append("#" * _HEADING_LEVEL[name] + " " + text)
            return
        if name in _BLOCK_TAGS:
            has_block_child = any(
                isinstance(c, Tag) and c.name in _BLOCK_TAGS
                for c in el.children
            )
            if not has_block_child:
                text = el.get_text(" ", strip=True)
                if text:
                    lines.append(f"- {text}" if name == "li" else text)
                return
        for child in el.children:
            if isinstance(child, Tag):
                walk(child)

    walk(body)
    return lines


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(_NOISE_TAGS):
        tag.decompose()
    body: Tag = soup.find("body") or soup  # type: ignore[assignment]
    return "\n".join(_extract_lines(body))


def fetch_html_text(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Télécharge une page et la convertit en texte ; les erreurs HTTP sont propagées."""
    log.debug("GET %s (timeout %ss)", url, timeout)
    resp = requests.get(url, timeout=timeout, headers={"User-Agent": _USER_AGENT})
    resp.raise_for_status()
    resp.encoding = resp.apparent_encoding or "utf-8"
    return html_to_text(resp.text)
