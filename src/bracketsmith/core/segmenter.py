from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List


CODE = "code"
LITERAL = "literal"


@dataclass(frozen=True)
class Segment:
    kind: str
    text: str

    @property
    def is_code(self) -> bool:
        return self.kind == CODE


class Segmenter:
    def segment(self, text: str) -> List[Segment]:
        raise NotImplementedError


class RawSegmenter(Segmenter):
    """Treats the whole text as code (heuristic-only strategy)."""

    def segment(self, text: str) -> List[Segment]:
        if not text:
            return []
        return [Segment(CODE, text)]


_HEREDOC_START_RE = re.compile(r"<<<[ \t]*(['\"]?)([A-Za-z_][A-Za-z0-9_]*)\1\r?\n")
_OPEN_TAG_RE = re.compile(r"<\?(?:php\b|=)?", re.IGNORECASE)


def _is_template(text: str) -> bool:
    head = text.lstrip("\ufeff \t\r\n")
    if head.startswith("<?"):
        return True
    return head.startswith("<") and not head.startswith("<<<") and _OPEN_TAG_RE.search(head) is not None


class PhpSegmenter(Segmenter):
    """
    Lightweight PHP scanner splitting text into code and literal spans.

    Literal spans:
      - '...', "..." and `...` strings (double quotes kept whole, interpolation included)
      - // and # line comments (up to the newline or a closing ?> tag)
      - /* ... */ and /** ... */ comments
      - heredoc / nowdoc, from the <<< marker through the closing identifier

    "#[" opens a PHP 8 attribute and stays code. Text that begins with markup
    (an open tag or HTML) is a template: anything outside <?php ... ?> is inline
    HTML and is treated as code. Any other text is read as a PHP fragment, so a
    "<?" inside one of its strings does not switch modes. Unterminated literals
    run to the end.
    """

    def segment(self, text: str) -> List[Segment]:
        parts: List[Segment] = []
        code_start = 0
        i = 0
        n = len(text)
        in_php = not _is_template(text)

        def flush_code(end: int) -> None:
            if end > code_start:
                parts.append(Segment(CODE, text[code_start:end]))

        while i < n:
            if not in_php:
                m = _OPEN_TAG_RE.search(text, i)
                if m is None:
                    break
                i = m.end()
                in_php = True
                continue

            ch = text[i]

            if ch == "?" and text.startswith("?>", i):
                i += 2
                in_php = False
                continue

            end = -1
            if ch in ("'", '"', "`"):
                end = self._scan_quoted(text, i, ch)
            elif ch == "/" and text.startswith("/*", i):
                close = text.find("*/", i + 2)
                end = n if close < 0 else close + 2
            elif (ch == "/" and text.startswith("//", i)) or (ch == "#" and not text.startswith("#[", i)):
                end = self._scan_line_comment(text, i)
            elif ch == "<" and text.startswith("<<<", i):
                end = self._scan_heredoc(text, i)

            if end < 0:
                i += 1
                continue

            flush_code(i)
            parts.append(Segment(LITERAL, text[i:end]))
            code_start = end
            i = end

        flush_code(n)
        return parts

    @staticmethod
    def _scan_quoted(text: str, start: int, quote: str) -> int:
        i = start + 1
        n = len(text)
        while i < n:
            c = text[i]
            if c == "\\":
                i += 2
                continue
            if c == quote:
                return i + 1
            i += 1
        return n

    @staticmethod
    def _scan_line_comment(text: str, start: int) -> int:
        i = start
        n = len(text)
        while i < n:
            c = text[i]
            if c in ("\n", "\r"):
                return i
            if c == "?" and text.startswith("?>", i):
                return i
            i += 1
        return n

    @staticmethod
    def _scan_heredoc(text: str, start: int) -> int:
        m = _HEREDOC_START_RE.match(text, start)
        if m is None:
            return -1
        label = re.escape(m.group(2))
        # PHP 7.3+ allows an indented closing marker.
        close = re.compile(r"^[ \t]*" + label + r"\b", re.MULTILINE)
        found = close.search(text, m.end())
        if found is None:
            return len(text)
        return found.end()


_SEGMENTERS: Dict[str, Callable[[], Segmenter]] = {
    "raw": RawSegmenter,
    "php": PhpSegmenter,
}


def available_segmenters() -> List[str]:
    return sorted(_SEGMENTERS)


def get_segmenter(name: str) -> Segmenter:
    key = name.strip().lower()
    if key not in _SEGMENTERS:
        raise ValueError(f"Unknown segmenter: {name!r} (expected one of {available_segmenters()})")
    return _SEGMENTERS[key]()
