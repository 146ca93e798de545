"""Report configuration."""

from dataclasses import dataclass
from enum import Enum

from stackreport.pruner import DOMINANCE_FACTOR, NamePattern


class PatternMode(Enum):
    """How a name filter string is matched against frame names."""

    SUBSTRING = "substring"
    REGEX = "regex"


@dataclass(slots=True, frozen=True)
class ReportConfig:
    """Options shared by every renderer of one report session."""

    sort_by_total: bool = False
    pattern_mode: PatternMode = PatternMode.SUBSTRING
    dominance: float = DOMINANCE_FACTOR
    callgrind_creator: str = "stackreport"
    callgrind_cmd: str = "profile"

    def build_pattern(self, text: str) -> NamePattern:
        """Turn a user-supplied filter string into a NamePattern."""
        if self.pattern_mode is PatternMode.REGEX:
            return NamePattern.regex(text)
        return NamePattern.substring(text)
