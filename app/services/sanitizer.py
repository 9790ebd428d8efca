import re

from bs4 import BeautifulSoup, Comment, Tag

# Matches WordPress shortcode tags such as [et_pb_section ...] or [/et_pb_section]
_SHORTCODE_RE = re.compile(r"\[/?[a-z_\-]+(?:\s[^\]]*?)?\]", re.IGNORECASE)

# Tags whose entire subtree is dropped from article bodies.  iframes are kept
# because posts embed video players with them.
_REMOVE_TAGS = {
    "script",
    "noscript",
    "object",
    "embed",
    "applet",
    "template",
}

# Event-handler attributes (onclick, onload, ...) are never passed through
_EVENT_ATTR_RE = re.compile(r"^on\w+$", re.IGNORECASE)

_WHITESPACE_RE = re.compile(r"\s+")


def strip_shortcodes(html: str) -> str:
    """Remove WordPress shortcode tags (e.g. ``[et_pb_section ...]``) from ``html``.

    Some page builders (Divi, WPBakery, …) leave shortcode markup in the
    rendered post content when the builder's own pipeline is bypassed.
    """
    return _SHORTCODE_RE.sub("", html)


def clean_body(html: str) -> str:
    """Return post body markup with shortcodes, scripts, comments and event handlers removed.

    Markup that needs no cleaning is returned unchanged, so calling this on
    its own output is a no-op.
    """
    html = strip_shortcodes(html or "").strip()
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    changed = False

    for tag in soup.find_all(_REMOVE_TAGS):
        tag.decompose()
        changed = True

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
        changed = True

    for tag in soup.find_all(True):
        if not isinstance(tag, Tag):
            continue
        junk = [attr for attr in tag.attrs if _EVENT_ATTR_RE.match(attr)]
        for attr in junk:
            del tag[attr]
            changed = True

    return str(soup).strip() if changed else html


def to_plain_text(html: str) -> str:
    """Strip markup from *html* and collapse runs of whitespace."""
    if not html or not html.strip():
        return ""
    text = BeautifulSoup(html, "lxml").get_text()
    return _WHITESPACE_RE.sub(" ", text).strip()
