from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from bracketsmith.core.segmenter import Segment, Segmenter, get_segmenter


# Single-line, non-nested bracket span.
_BRACKET_RE = re.compile(r"\[([^\[\]\r\n]*)\]")

# Interiors that look like a regex character class rather than an array.
_CHAR_CLASS_RE = re.compile(r"[\w^\-\\]+")
_QUOTES = ("'", '"', "`")

# str.strip() covers Unicode whitespace (a superset of mb_trim's default set,
# e.g. it also drops \x1c-\x1f); these are not whitespace to Python.
_TRIM_EXTRA = "\x00\u180e\ufeff"

# Literal placeholders (private use area). A literal spanning lines keeps a
# newline in its placeholder so that brackets around it still count as multi-line.
_MASK_OPEN = "\ue000"
_MASK_CLOSE = "\ue001"
_MASK_RE = re.compile(_MASK_OPEN + r"(\d+)\n?" + _MASK_CLOSE)


def mb_trim(text: str) -> str:
    out = text.strip()
    while out and (out[0] in _TRIM_EXTRA or out[-1] in _TRIM_EXTRA):
        out = out.strip(_TRIM_EXTRA).strip()
    return out


@dataclass(frozen=True)
class NormalizationConfig:
    strategy: str = "php"
    max_passes: int = 20
    char_class_guard: bool = True


@dataclass(frozen=True)
class NormalizeResult:
    text: str
    changed: bool
    passes: int
    converged: bool


class BracketNormalizer:
    """
    Pads single-line array brackets with exactly one space on each side.

    The segmenter separates code from literals (strings, comments, heredocs).
    Literals are swapped for opaque placeholders, the bracket rule runs to a
    fixed point over the masked text, and the literals are put back unchanged.
    An array such as ['a', 'b'] is therefore still seen as one bracket span.
    """

    def __init__(self, cfg: Optional[NormalizationConfig] = None, segmenter: Optional[Segmenter] = None) -> None:
        self.cfg = cfg or NormalizationConfig()
        if self.cfg.max_passes < 1:
            raise ValueError("max_passes must be >= 1")
        self.segmenter = segmenter or get_segmenter(self.cfg.strategy)

    def normalize(self, text: str) -> NormalizeResult:
        segments = self.segmenter.segment(text)

        if all(s.is_code for s in segments):
            new_text, passes, converged = self._rewrite_to_fixed_point(text)
        elif _MASK_OPEN in text or _MASK_CLOSE in text:
            new_text, passes, converged = self._rewrite_segments(segments)
        else:
            literals: List[str] = []
            masked = []
            for seg in segments:
                if seg.is_code:
                    masked.append(seg.text)
                    continue
                nl = "\n" if ("\n" in seg.text or "\r" in seg.text) else ""
                masked.append(f"{_MASK_OPEN}{len(literals)}{nl}{_MASK_CLOSE}")
                literals.append(seg.text)
            rewritten, passes, converged = self._rewrite_to_fixed_point("".join(masked))
            new_text = _MASK_RE.sub(lambda m: literals[int(m.group(1))], rewritten)

        return NormalizeResult(text=new_text, changed=(new_text != text), passes=passes, converged=converged)

    def rewrite_match(self, match: re.Match) -> str:
        full = match.group(0)
        interior = match.group(1)

        trimmed = mb_trim(interior)
        if trimmed == "":
            return full
        if self.cfg.char_class_guard and self._looks_like_char_class(interior):
            return full
        return f"[ {trimmed} ]"

    def _rewrite_to_fixed_point(self, code: str) -> tuple[str, int, bool]:
        current = code
        for i in range(1, self.cfg.max_passes + 1):
            nxt = _BRACKET_RE.sub(self.rewrite_match, current)
            if nxt == current:
                return current, i, True
            current = nxt
        return current, self.cfg.max_passes, False

    def _rewrite_segments(self, segments: List[Segment]) -> tuple[str, int, bool]:
        # Text already holding placeholder characters: rewrite code segments one by one.
        passes = 0
        converged = True
        out = []
        for seg in segments:
            if not seg.is_code:
                out.append(seg.text)
                continue
            new_text, used, done = self._rewrite_to_fixed_point(seg.text)
            out.append(new_text)
            passes = max(passes, used)
            converged = converged and done
        return "".join(out), passes, converged

    @staticmethod
    def _looks_like_char_class(interior: str) -> bool:
        if "," in interior or any(q in interior for q in _QUOTES):
            return False
        return _CHAR_CLASS_RE.fullmatch(interior) is not None


_DEFAULT: Optional[BracketNormalizer] = None


def normalize(text: str) -> tuple[str, bool]:
    """Normalize with the default configuration; returns (new_text, changed)."""
    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = BracketNormalizer()
    result = _DEFAULT.normalize(text)
    return result.text, result.changed
