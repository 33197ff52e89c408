"""Markup document tree with typed visit and replace operations."""

from typing import Iterator, List, Optional, Union

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.element import Tag
from bs4.formatter import HTMLFormatter


MARKUP_EXTENSIONS = {".html", ".htm"}

# Elements carrying this attribute are left exactly as written
IGNORE_ATTRIBUTE = "wcm-ignore"

LINK_PLACEHOLDER = "wcm-link"
SCRIPT_PLACEHOLDER = "wcm-script"

# Minimal escaping, void elements written without a closing slash
FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)


class MarkupDocument:
    """
    A parsed markup file.

    Wraps a BeautifulSoup tree so that callers only deal with import links,
    scripts and placeholder elements instead of ad hoc tree queries.
    """

    def __init__(self, soup: BeautifulSoup):
        self._soup = soup

    @classmethod
    def parse(cls, markup: Union[str, bytes]) -> "MarkupDocument":
        """
        Parse markup into a document.

        Raw bytes are decoded by BeautifulSoup, which detects the encoding.
        """
        return cls(BeautifulSoup(markup, "html.parser"))

    def iter_import_links(self) -> Iterator[Tag]:
        """
        Yield `<link rel="import">` elements in document order.

        Elements flagged with the ignore attribute are skipped. The list is
        collected up front so elements may be replaced while iterating.
        """
        links = [
            link for link in self._soup.find_all("link")
            if "import" in _rel_values(link) and not link.has_attr(IGNORE_ATTRIBUTE)
        ]
        yield from links

    def iter_scripts(self) -> Iterator[Tag]:
        """Yield `<script>` elements not flagged to be ignored, in document order."""
        scripts = [
            script for script in self._soup.find_all("script")
            if not script.has_attr(IGNORE_ATTRIBUTE)
        ]
        yield from scripts

    def link_placeholder(self, rel: str, dependency: str, lookup: str) -> Tag:
        """Create a `<wcm-link>` element for an external import."""
        return self._soup.new_tag(
            LINK_PLACEHOLDER,
            attrs={"rel": rel, "for": dependency, "path": lookup},
        )

    def script_placeholder(self, path: str, dependency: Optional[str] = None) -> Tag:
        """Create a `<wcm-script>` element, optionally bound to a dependency."""
        attrs = {}
        if dependency is not None:
            attrs["for"] = dependency
        attrs["path"] = path
        return self._soup.new_tag(SCRIPT_PLACEHOLDER, attrs=attrs)

    def replace(self, element: Tag, replacement: Tag) -> None:
        element.replace_with(replacement)

    def remove(self, element: Tag) -> None:
        element.decompose()

    def append(self, element: Tag) -> None:
        """Append an element at the very end of the document."""
        self._soup.append(element)

    def serialize(self) -> str:
        return self._soup.decode(formatter=FORMATTER)


def is_markup(file_name: str) -> bool:
    """Check if a file should be parsed as markup."""
    lowered = file_name.lower()
    return any(lowered.endswith(ext) for ext in MARKUP_EXTENSIONS)


def rel_attribute(element: Tag) -> str:
    """Return the element's rel attribute as a single string."""
    return " ".join(_rel_values(element))


def inline_body(script: Tag) -> Optional[str]:
    """Return a script's inline text, or None if it has no body."""
    if not script.contents:
        return None
    return "".join(str(child) for child in script.contents)


def _rel_values(element: Tag) -> List[str]:
    rel = element.get("rel")
    if rel is None:
        return []
    if isinstance(rel, str):
        return rel.split()
    return list(rel)
