import html
import re
from typing import List, Optional
from urllib.parse import quote

import bleach
import mwparserfromhell
from mwparserfromhell.nodes import (
    Comment,
    ExternalLink,
    HTMLEntity,
    Tag,
    Template,
    Text,
    Wikilink,
)

_HEADING_RE = re.compile(r"^(={1,6})\s*(.+?)\s*\1\s*$")
_LIST_RE = re.compile(r"^([*#:;]+)\s*(.*)$")
_RULE_RE = re.compile(r"^-{4,}\s*$")

# marker -> (list element, item element)
_LIST_TYPES = {
    "*": ("ul", "li"),
    "#": ("ol", "li"),
    ";": ("dl", "dt"),
    ":": ("dl", "dd"),
}

_INLINE_TAGS = frozenset(
    {
        "b",
        "i",
        "u",
        "s",
        "del",
        "ins",
        "code",
        "tt",
        "sub",
        "sup",
        "small",
        "big",
        "span",
        "em",
        "strong",
        "nowiki",
    }
)

ALLOWED_TAGS = frozenset(
    {
        "a",
        "p",
        "br",
        "hr",
        "pre",
        "blockquote",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "ul",
        "ol",
        "li",
        "dl",
        "dt",
        "dd",
    }
    | (_INLINE_TAGS - {"nowiki"})
)
ALLOWED_ATTRIBUTES = {"a": ["href", "name", "title"]}
ALLOWED_PROTOCOLS = frozenset({"http", "https", "ftp", "mailto", "file"})


def anchor_name(title: str) -> str:
    """Section anchor as used by MediaWiki: spaces become underscores."""
    return "_".join(str(title).split())


def wikilink_href(title: str) -> str:
    """Relative href for an internal ``[[Page title#Section]]`` link."""
    page, _, section = str(title).strip().partition("#")
    href = quote(anchor_name(page), safe="/:()',")
    if section:
        href += "#" + quote(anchor_name(section), safe="")
    return href


class MediaWikiRenderer:
    """Convert a subset of MediaWiki markup into sanitized HTML.

    Block structure (headings, lists, rules, preformatted text, paragraphs) is
    handled line by line; inline markup goes through ``mwparserfromhell``.
    Templates and comments are dropped.
    """

    def render(self, text: str) -> str:
        if not text:
            return ""
        out: List[str] = []
        paragraph: List[str] = []
        preformatted: List[str] = []
        lists: List[str] = []

        def flush_paragraph():
            if paragraph:
                out.append("<p>" + " ".join(paragraph) + "</p>")
                paragraph.clear()

        def flush_preformatted():
            if preformatted:
                out.append(
                    "<pre>" + "\n".join(html.escape(l) for l in preformatted) + "</pre>"
                )
                preformatted.clear()

        for raw_line in self._strip_comments(text).splitlines():
            line = raw_line.rstrip()

            if line.startswith(" ") and line.strip():
                flush_paragraph()
                self._sync_lists(out, lists, "")
                preformatted.append(line[1:])
                continue
            flush_preformatted()

            if not line.strip():
                flush_paragraph()
                self._sync_lists(out, lists, "")
                continue

            heading = _HEADING_RE.match(line)
            if heading:
                flush_paragraph()
                self._sync_lists(out, lists, "")
                level = len(heading.group(1))
                title = heading.group(2)
                out.append(
                    '<h{0}><a name="{1}"></a>{2}</h{0}>'.format(
                        level,
                        html.escape(anchor_name(self._plain(title)), quote=True),
                        self.render_inline(title),
                    )
                )
                continue

            if _RULE_RE.match(line):
                flush_paragraph()
                self._sync_lists(out, lists, "")
                out.append("<hr/>")
                continue

            item = _LIST_RE.match(line)
            if item:
                flush_paragraph()
                markers = item.group(1)
                self._sync_lists(out, lists, markers)
                item_tag = _LIST_TYPES[markers[-1]][1]
                out.append(
                    "<{0}>{1}</{0}>".format(item_tag, self.render_inline(item.group(2)))
                )
                continue

            self._sync_lists(out, lists, "")
            paragraph.append(self.render_inline(line))

        flush_paragraph()
        flush_preformatted()
        self._sync_lists(out, lists, "")
        return self.sanitize("\n".join(out))

    def render_inline(self, text: str) -> str:
        return self._render_nodes(mwparserfromhell.parse(text).nodes)

    @staticmethod
    def sanitize(markup: str) -> str:
        return bleach.clean(
            markup,
            tags=ALLOWED_TAGS,
            attributes=ALLOWED_ATTRIBUTES,
            protocols=ALLOWED_PROTOCOLS,
            strip=True,
        )

    # ----------------------------------------------------------------- blocks
    @staticmethod
    def _strip_comments(text: str) -> str:
        return re.sub(r"<!--.*?-->", "", text, flags=re.DOTALL)

    @staticmethod
    def _sync_lists(out: List[str], stack: List[str], markers: str) -> None:
        wanted = [_LIST_TYPES[ch][0] for ch in markers]
        common = 0
        while (
            common < len(stack)
            and common < len(wanted)
            and stack[common] == wanted[common]
        ):
            common += 1
        while len(stack) > common:
            out.append("</{}>".format(stack.pop()))
        for list_tag in wanted[common:]:
            out.append("<{}>".format(list_tag))
            stack.append(list_tag)

    # ----------------------------------------------------------------- inline
    def _plain(self, text: str) -> str:
        return mwparserfromhell.parse(text).strip_code().strip()

    def _render_nodes(self, nodes) -> str:
        return "".join(self._render_node(node) for node in nodes)

    def _render_node(self, node) -> str:
        if isinstance(node, Text):
            return html.escape(str(node.value), quote=False)
        if isinstance(node, (Comment, Template)):
            return ""
        if isinstance(node, HTMLEntity):
            return html.escape(node.normalize(), quote=False)
        if isinstance(node, Wikilink):
            return self._render_wikilink(node)
        if isinstance(node, ExternalLink):
            return self._render_external_link(node)
        if isinstance(node, Tag):
            return self._render_tag(node)
        return html.escape(str(node), quote=False)

    def _render_wikilink(self, node: Wikilink) -> str:
        title = str(node.title).strip()
        if title.lower().startswith(("file:", "image:", "category:")):
            return ""
        label: Optional[str] = None
        if node.text is not None:
            label = self._render_nodes(node.text.nodes)
        if not label:
            label = html.escape(title, quote=False)
        return '<a href="{}">{}</a>'.format(
            html.escape(wikilink_href(title), quote=True), label
        )

    def _render_external_link(self, node: ExternalLink) -> str:
        url = str(node.url).strip()
        if node.title is not None and str(node.title).strip():
            label = self._render_nodes(node.title.nodes)
        else:
            label = html.escape(url, quote=False)
        return '<a href="{}">{}</a>'.format(html.escape(url, quote=True), label)

    def _render_tag(self, node: Tag) -> str:
        name = str(node.tag).strip().lower()
        if name == "br":
            return "<br/>"
        if name not in _INLINE_TAGS:
            # Unknown tags keep their text content only.
            return self._render_nodes(node.contents.nodes) if node.contents else ""
        if name == "nowiki":
            return html.escape(str(node.contents or ""), quote=False)
        contents = self._render_nodes(node.contents.nodes) if node.contents else ""
        return "<{0}>{1}</{0}>".format(name, contents)
