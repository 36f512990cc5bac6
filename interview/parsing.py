"""
Parsers for generated text: the numbered question list and the sectioned
answer evaluation.
"""
import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from interview.errors import InsufficientQuestions
from models.schemas import FeedbackRecord

logger = logging.getLogger(__name__)


class QuestionListParser:
    """
    Splits one generated blob into an ordered list of question strings.

    Items are introduced by an ordinal marker ("1. ", "2. ", ...), normally at
    the start of a line. Whatever precedes the first marker is preamble and
    dropped.
    The "[TYPE] [DIFFICULTY] skill:" shape is not validated.
    """

    ORDINAL_MARKER = re.compile(r"^[ \t]*\d+\.[ \t]+", re.MULTILINE)
    INLINE_MARKER = re.compile(r"(?<!\S)(\d+)\.[ \t]+")

    def __init__(self, required: int = 10):
        self.required = required

    @staticmethod
    def _fragments(text: str, markers: List[re.Match]) -> List[str]:
        items = []
        for i, marker in enumerate(markers):
            end = markers[i + 1].start() if i + 1 < len(markers) else len(text)
            item = text[marker.end():end].strip()
            if item:
                items.append(item)
        return items

    def _counted_markers(self, text: str) -> List[re.Match]:
        """Markers anywhere in a line, kept only while they count up from 1."""
        markers = []
        for match in self.INLINE_MARKER.finditer(text):
            if int(match.group(1)) == len(markers) + 1:
                markers.append(match)
        return markers

    def split(self, raw_text: str) -> List[str]:
        """
        All marker-delimited items, trimmed, empties removed.

        Line-start markers are used first. When they give too few items
        (e.g. the whole list on one line), markers inside lines are accepted
        as long as they continue the 1, 2, 3, ... count.
        """
        text = raw_text or ""
        items = self._fragments(text, list(self.ORDINAL_MARKER.finditer(text)))
        if len(items) < self.required:
            counted = self._fragments(text, self._counted_markers(text))
            if len(counted) > len(items):
                items = counted
        return items

    def parse(self, raw_text: str) -> List[str]:
        """
        Parse exactly `required` questions, discarding any extras.

        Raises:
            InsufficientQuestions: fewer than `required` items were found
        """
        items = self.split(raw_text)
        if len(items) < self.required:
            logger.error(f"Only {len(items)} questions parsed from generated text")
            raise InsufficientQuestions(found=len(items), required=self.required)

        if len(items) > self.required:
            logger.info(f"Discarding {len(items) - self.required} extra generated questions")
        return items[:self.required]


@dataclass(frozen=True)
class Section:
    """A bulleted section running from `marker` up to `terminator` (or end of text)."""
    name: str
    marker: str
    terminator: Optional[str]
    # Items starting with these were a following header swallowed by the split
    guards: Tuple[str, ...] = ()


class FeedbackParser:
    """
    Ordered section scanner for evaluation text of the form

        SCORE: 7
        STRENGTHS:
        - ...
        IMPROVEMENTS:
        - ...
        FEEDBACK:
        narrative

    Every section is located independently in the original text, so a missing
    or malformed section never shifts the ones after it. Parsing is total:
    anything unrecognised degrades to the empty default for that field.
    """

    SCORE = re.compile(r"SCORE:\s*(\d+)", re.IGNORECASE)
    BULLET = re.compile(r"^- ", re.MULTILINE)

    STRENGTHS = Section("strengths", "STRENGTHS:", "IMPROVEMENTS:", guards=("IMPROVEMENTS", "FEEDBACK"))
    IMPROVEMENTS = Section("improvements", "IMPROVEMENTS:", "FEEDBACK:", guards=("FEEDBACK",))
    NARRATIVE_MARKER = "FEEDBACK:"

    # Scan order; each entry maps to a FeedbackRecord field
    SECTIONS = (STRENGTHS, IMPROVEMENTS)

    @staticmethod
    def _find(text: str, marker: str, start: int = 0) -> Optional[re.Match]:
        return re.compile(re.escape(marker), re.IGNORECASE).search(text, start)

    @classmethod
    def region(cls, text: str, marker: str, terminator: Optional[str]) -> Optional[str]:
        """Text after the first `marker` up to the next `terminator`, or None."""
        opening = cls._find(text, marker)
        if opening is None:
            return None

        end = len(text)
        if terminator:
            closing = cls._find(text, terminator, opening.end())
            if closing is not None:
                end = closing.start()
        return text[opening.end():end]

    @classmethod
    def parse_score(cls, text: str) -> Optional[int]:
        match = cls.SCORE.search(text)
        return int(match.group(1)) if match else None

    @classmethod
    def parse_bullets(cls, text: str, section: Section) -> List[str]:
        region = cls.region(text, section.marker, section.terminator)
        if region is None:
            return []

        items = [item.strip() for item in cls.BULLET.split(region.strip())]
        if items and items[0] == "":
            items = items[1:]
        return [
            item for item in items
            if item and not item.startswith(section.guards)
        ]

    @classmethod
    def parse_narrative(cls, text: str) -> str:
        region = cls.region(text, cls.NARRATIVE_MARKER, None)
        return region.strip() if region is not None else ""

    @classmethod
    def parse(cls, raw_text: Optional[str]) -> FeedbackRecord:
        if not isinstance(raw_text, str) or not raw_text:
            return FeedbackRecord()

        record = FeedbackRecord(
            score=cls.parse_score(raw_text),
            feedback=cls.parse_narrative(raw_text),
            **{section.name: cls.parse_bullets(raw_text, section) for section in cls.SECTIONS},
        )
        if record.is_empty:
            logger.warning("Evaluation text had no recognisable sections")
        return record
