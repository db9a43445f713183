"""Fenced code block language rewriting, located with markdown-it tokens"""

import logging
import re

from markdown_it import MarkdownIt

from mdform.core.models import CodeBlockTransform, Direction, MDConfig


logger = logging.getLogger(__name__)

FENCE_OPEN_RE = re.compile(r"^(\s*(?:`{3,}|~{3,})\s*)(\S+)(.*)$")


def _make_parser() -> MarkdownIt:
    return MarkdownIt("gfm-like", options_update={"linkify": False})


def _fence_lang(token) -> str:
    """First word of a fence token's info string ('' when absent)."""
    info = (token.info or "").strip()
    return info.split()[0] if info else ""


def transform_code_blocks(text: str, transforms: list[CodeBlockTransform], direction: Direction) -> str:
    """Rename fenced code languages per transforms applicable to direction.

    Only the language word on each fence's opening line changes; everything
    else in text is returned byte-for-byte.
    """
    active = [t for t in transforms if t.applies_to(direction)]
    if not text or not active:
        return text

    lines = text.split("\n")
    replaced = 0
    for tok in _make_parser().parse(text):
        if tok.type != 'fence' or not tok.map:
            continue
        lang = _fence_lang(tok)
        for t in active:
            source, target = t.langs(direction)
            if lang != source:
                continue
            start = tok.map[0]
            m = FENCE_OPEN_RE.match(lines[start])
            if m and m.group(2) == source:
                lines[start] = f"{m.group(1)}{target}{m.group(3)}"
                replaced += 1
            break

    if replaced:
        logger.debug("Rewrote %d code block language(s) on %s", replaced, direction.value)
    return "\n".join(lines)


def apply_md_config(text: str, md_config: MDConfig | None, direction: Direction) -> str:
    """Apply a repository's markdown handlers to text; no-op without config."""
    if md_config is None:
        return text
    return transform_code_blocks(text, md_config.code_block_transforms, direction)
