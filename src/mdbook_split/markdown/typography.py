"""Dash and ellipsis replacement for the smart punctuation extension.

markdown-it's ``replacements`` rule also rewrites ``(c)``, ``+-`` and runs
of ``?``/``!``. Smart punctuation here only covers quotes (markdown-it's
``smartquotes``), dashes and ellipses, which this plugin adds.
"""

from __future__ import annotations

import re

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

EN_DASH = "–"
EM_DASH = "—"
ELLIPSIS = "…"

_HYPHEN_RUN_RE = re.compile(r"-{2,}")
_ELLIPSIS_RE = re.compile(r"\.\.\.")


def smart_dashes_plugin(md: MarkdownIt) -> None:
    """Register the dash and ellipsis rule ahead of ``smartquotes``."""
    md.core.ruler.before("smartquotes", "smart_dashes", _smart_dashes)


def dashes(count: int) -> str:
    """Spell a run of ``count`` hyphens as en and em dashes.

    Runs divisible by three become em dashes, other even runs en dashes.
    The remaining lengths mix the two, em dashes first, using as few en
    dashes as possible.
    """
    if count % 3 == 0:
        ems, ens = count // 3, 0
    elif count % 2 == 0:
        ems, ens = 0, count // 2
    elif count % 3 == 2:
        ems, ens = (count - 2) // 3, 1
    else:
        ems, ens = (count - 4) // 3, 2
    return EM_DASH * ems + EN_DASH * ens


def replace_punctuation(text: str) -> str:
    text = _HYPHEN_RUN_RE.sub(lambda match: dashes(len(match.group())), text)
    return _ELLIPSIS_RE.sub(ELLIPSIS, text)


def _smart_dashes(state: StateCore) -> None:
    for token in state.tokens:
        if token.type == "inline" and token.children:
            _replace_in_children(token.children)


def _replace_in_children(children: list[Token]) -> None:
    inside_autolink = 0
    for token in children:
        if token.type == "link_open" and token.info == "auto":
            inside_autolink += 1
        elif token.type == "link_close" and token.info == "auto":
            inside_autolink -= 1
        elif token.type == "text" and not inside_autolink:
            token.content = replace_punctuation(token.content)
