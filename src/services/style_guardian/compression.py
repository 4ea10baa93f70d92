"""
Text compression strategies for the "compress text" fix.

Which phrases count as filler is a policy choice, so compression is a
pluggable strategy: anything with a ``compress(text) -> str`` method works.
"""
import re
from typing import Protocol, Sequence

from .constants import MAX_COMPRESSION_RATIO


class TextCompressor(Protocol):
    def compress(self, text: str) -> str:
        ...


# (pattern, replacement) pairs applied in order.
DEFAULT_FILLER_RULES: tuple[tuple[str, str], ...] = (
    (r"\s*\([^()]*\)", ""),
    (r"\bit is important to note that\s*", ""),
    (r"\bit should be noted that\s*", ""),
    (r"\bas a matter of fact,?\s*", ""),
    (r"\bdue to the fact that\b", "because"),
    (r"\bin order to\b", "to"),
    (r"\bat this point in time\b", "now"),
    (r"\bfor the purpose of\b", "for"),
    (r"\bin the event that\b", "if"),
    (r"\b(?:basically|actually|really|very|simply|quite|essentially)\s+", ""),
    (r"(?:매우|정말|아주|사실상|기본적으로)\s+", ""),
    (r"라고 할 수 있습니다", "입니다"),
    (r"하는 것이 중요합니다", "해야 합니다"),
    (r"\s*등등", ""),
)


def _tidy(text: str) -> str:
    text = re.sub(r"[ \t]{2,}", " ", text)
    text = re.sub(r" +([,.;:!?])", r"\1", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    return text.strip()


class FillerPhraseCompressor:
    """
    Removes filler phrasing with a fixed list of regex rules.

    A rule is skipped when applying it would remove more than ``max_ratio`` of
    the original text in total.
    """

    def __init__(
        self,
        rules: Sequence[tuple[str, str]] = DEFAULT_FILLER_RULES,
        max_ratio: float = MAX_COMPRESSION_RATIO,
    ):
        self._rules = [(re.compile(p, re.IGNORECASE), r) for p, r in rules]
        self._max_ratio = max_ratio

    def compress(self, text: str) -> str:
        if not text:
            return text
        budget = len(text) * self._max_ratio
        result = text
        for pattern, replacement in self._rules:
            if not pattern.search(result):
                continue
            candidate = _tidy(pattern.sub(replacement, result))
            if not candidate or candidate == result:
                continue
            if len(text) - len(candidate) > budget:
                continue
            result = candidate
        return result
