from wikiview.gui.renderer import MediaWikiRenderer, anchor_name, wikilink_href


def _render(text: str) -> str:
    return MediaWikiRenderer().render(text)


def test_empty_text_renders_nothing():
    assert _render("") == ""


def test_heading_gets_named_anchor():
    out = _render("== Early life ==")
    assert '<h2><a name="Early_life"></a>Early life</h2>' in out


def test_paragraphs_join_lines_until_blank_line():
    out = _render("first\nsecond\n\nthird")
    assert "<p>first second</p>" in out
    assert "<p>third</p>" in out


def test_bold_and_italic():
    out = _render("'''bold''' and ''slanted''")
    assert "<b>bold</b>" in out
    assert "<i>slanted</i>" in out


def test_internal_link_uses_relative_href_with_underscores():
    out = _render("Go to [[Main Page|home]] or [[Help]].")
    assert '<a href="Main_Page">home</a>' in out
    assert '<a href="Help">Help</a>' in out


def test_external_links_with_and_without_title():
    out = _render("[https://example.org Example site] and https://example.com/x")
    assert '<a href="https://example.org">Example site</a>' in out
    assert '<a href="https://example.com/x">https://example.com/x</a>' in out


def test_nested_lists_follow_marker_prefix():
    out = _render("* one\n** two\n# three")
    assert out.count("<ul>") == 2
    assert "<li>two</li>" in out
    assert "<ol>" in out
    assert out.count("</ul>") == 2


def test_definition_list_items():
    out = _render("; term\n: definition")
    assert "<dt>term</dt>" in out
    assert "<dd>definition</dd>" in out


def test_preformatted_and_rule():
    out = _render(" indented <code>\n----")
    assert "<pre>indented &lt;code&gt;</pre>" in out
    assert "<hr" in out


def test_templates_comments_and_scripts_are_dropped():
    out = _render(
        "before {{Infobox|x=1}} after <!-- hidden --> <script>alert(1)</script>"
    )
    assert "Infobox" not in out
    assert "hidden" not in out
    assert "<script" not in out
    assert "before" in out and "after" in out


def test_link_helpers():
    assert anchor_name("History  of  it") == "History_of_it"
    assert wikilink_href("Main Page#Early life") == "Main_Page#Early_life"
    assert wikilink_href("#Local") == "#Local"
