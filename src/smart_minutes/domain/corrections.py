"""Deterministic whole-word text correction."""

import re
import threading
from functools import lru_cache
from pathlib import Path

from smart_minutes.logging import setup_logging

from .models import CorrectionRule, CorrectionRuleSet

logger = setup_logging()


@lru_cache(maxsize=512)
def _compile(pattern: str) -> re.Pattern[str]:
    # Lookarounds instead of \b so patterns that start or end with punctuation
    # still only match whole tokens.
    return re.compile(rf"(?<!\w){re.escape(pattern)}(?!\w)", re.IGNORECASE)


def apply_corrections(text: str, rules: tuple[CorrectionRule, ...] | list[CorrectionRule]) -> str:
    """
    Applies correction rules to text in declared order.

    Each rule replaces every case-insensitive whole-word occurrence of its
    pattern with its replacement, taken literally. Rule ``n`` sees the output
    of rules ``1..n-1``.

    Args:
        text: The text to correct.
        rules: Ordered correction rules.

    Returns:
        The corrected text.
    """
    for rule in rules:
        replacement = rule.replacement
        text = _compile(rule.pattern).sub(lambda _match: replacement, text)
    return text


class FileCorrectionRuleSource:
    """
    Serves the correction rule set stored in a JSON file.

    The file is re-read whenever its modification time changes, so rules can
    be updated without a restart.
    """

    def __init__(self, path: Path):
        self._path = path
        self._lock = threading.Lock()
        self._mtime_ns: int | None = None
        self._rule_set: CorrectionRuleSet | None = None

    def current(self) -> CorrectionRuleSet:
        with self._lock:
            mtime_ns = self._path.stat().st_mtime_ns
            if self._rule_set is None or mtime_ns != self._mtime_ns:
                self._rule_set = CorrectionRuleSet.from_file(self._path)
                self._mtime_ns = mtime_ns
                logger.info(
                    "Correction rules loaded",
                    extra={
                        "path": str(self._path),
                        "version": self._rule_set.version,
                        "rule_count": len(self._rule_set.rules),
                    },
                )
            return self._rule_set


class TranscriptCorrector:
    """Applies the current correction rule set to transcript text."""

    def __init__(self, rule_source: FileCorrectionRuleSource):
        self._rule_source = rule_source

    def correct(self, text: str) -> str:
        return apply_corrections(text, self._rule_source.current().rules)
