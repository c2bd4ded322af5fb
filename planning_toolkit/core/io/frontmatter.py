"""Frontmatter reader for a small YAML subset.

Supported: ``key: scalar``, flow lists ``[a, b]``, block lists (``- item``) and
nested mappings by indentation. Scalars stay strings (quotes stripped) so that
callers see exactly what was written; coercion is the caller's job.
"""
from __future__ import annotations

from typing import Any, Optional


DELIMITER = "---"


def split_frontmatter(text: str) -> tuple[Optional[str], str]:
    """Return (frontmatter_text, body). frontmatter_text is None when there is no block."""
    lines = text.splitlines()
    if not lines or lines[0].strip() != DELIMITER:
        return None, text
    for i in range(1, len(lines)):
        if lines[i].strip() == DELIMITER:
            return "\n".join(lines[1:i]), "\n".join(lines[i + 1 :])
    return None, text


def parse_frontmatter(text: str) -> tuple[Optional[dict[str, Any]], str]:
    block, body = split_frontmatter(text)
    if block is None:
        return None, body
    return _Reader(block).read(), body


def parse_scalar(raw: str) -> Any:
    value = raw.strip()
    if value.startswith("[") and value.endswith("]"):
        inner = value[1:-1]
        return [_unquote(item) for item in inner.split(",") if item.strip()]
    return _unquote(value)


def _unquote(raw: str) -> str:
    v = raw.strip()
    if len(v) >= 2 and v[0] == v[-1] and v[0] in ("'", '"'):
        return v[1:-1]
    return v


def _is_list_item(text: str) -> bool:
    return text == "-" or text.startswith("- ")


class _Reader:
    def __init__(self, block: str) -> None:
        self.lines: list[tuple[int, str]] = []
        for line in block.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            self.lines.append((len(line) - len(line.lstrip(" ")), stripped))
        self.pos = 0

    def read(self) -> dict[str, Any]:
        if not self.lines:
            return {}
        out = self._mapping(self.lines[0][0])
        return out if isinstance(out, dict) else {}

    def _peek(self) -> Optional[tuple[int, str]]:
        return self.lines[self.pos] if self.pos < len(self.lines) else None

    def _block(self, indent: int) -> Any:
        nxt = self._peek()
        if nxt is not None and _is_list_item(nxt[1]):
            return self._list(indent)
        return self._mapping(indent)

    def _mapping(self, indent: int) -> dict[str, Any]:
        out: dict[str, Any] = {}
        while self.pos < len(self.lines):
            ind, text = self.lines[self.pos]
            if ind < indent or (ind == indent and _is_list_item(text)):
                break
            self.pos += 1
            if ind > indent:
                # Stray deeper line with no owning key.
                continue
            key, sep, rest = text.partition(":")
            if not sep:
                continue
            out[_unquote(key)] = self._value(indent, rest)
        return out

    def _list(self, indent: int) -> list[Any]:
        out: list[Any] = []
        while self.pos < len(self.lines):
            ind, text = self.lines[self.pos]
            if ind != indent or not _is_list_item(text):
                break
            self.pos += 1
            item = text[1:].strip()
            if item:
                out.append(parse_scalar(item))
            else:
                child = self._peek()
                out.append(self._block(child[0]) if child and child[0] > indent else None)
        return out

    def _value(self, indent: int, rest: str) -> Any:
        if rest.strip():
            return parse_scalar(rest)
        child = self._peek()
        if child is None:
            return None
        child_indent, child_text = child
        if child_indent > indent or (child_indent == indent and _is_list_item(child_text)):
            return self._block(child_indent)
        return None
