"""Tag-balance check for translated markup fragments."""

import re

from segmerge.models.result import BalanceReport

TAG_TOKEN_RE = re.compile(r"<(/?)([a-zA-Z][a-zA-Z0-9-]*)[^>]*>")

# Comment and script/style bodies are text, even where it looks like markup
COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
RAW_TEXT_RE = re.compile(
    r"(<(script|style)\b[^>]*>).*?(</\2\s*>)", re.DOTALL | re.IGNORECASE
)

# Elements that never take a closing tag
VOID_TAGS: frozenset[str] = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})


def _strip_opaque(fragment: str) -> str:
    """Drop comments and the contents of ``script``/``style`` elements."""
    fragment = COMMENT_RE.sub("", fragment)
    return RAW_TEXT_RE.sub(r"\1\3", fragment)


def check_balance(fragment: str) -> BalanceReport:
    """Report opening and closing tags of ``fragment`` that do not pair up.

    Void tags and ``<tag/>`` tokens are ignored, as is anything inside
    comments or ``script``/``style`` bodies. A closing tag consumes the
    nearest open tag of the same name; closings with no open counterpart
    are reported first, followed by tags still open at the end.

    Args:
        fragment: Markup to check.

    Returns:
        BalanceReport with ``balanced`` and the unmatched tag names.
    """
    stack: list[str] = []
    unmatched_closing: list[str] = []

    for match in TAG_TOKEN_RE.finditer(_strip_opaque(fragment)):
        token = match.group(0)
        name = match.group(2).lower()

        if name in VOID_TAGS or token.rstrip(">").rstrip().endswith("/"):
            continue

        if match.group(1):
            for pos in range(len(stack) - 1, -1, -1):
                if stack[pos] == name:
                    del stack[pos]
                    break
            else:
                unmatched_closing.append(name)
        else:
            stack.append(name)

    unmatched = unmatched_closing + stack
    return BalanceReport(balanced=not unmatched, unmatched_tags=unmatched)
