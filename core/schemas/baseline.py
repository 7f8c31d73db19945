"""Court baseline schemas.

A CourtBaseline is the peer reference a decision-maker is compared against.
When no peer data exists the provider returns BaselineUnavailable instead,
so callers cannot confuse "no baseline" with an all-zero one.
"""

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Mapping

from core.schemas.metrics import CaseTypePattern, OutcomeAnalysis, TemporalPeriod


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class CourtBaseline:
    """Aggregate statistics over every decision-maker in one court.

    Every mapping, including the rate and breakdown maps nested in the
    patterns, is a read-only view; a baseline is never mutated once built.

    Attributes:
        court_id: Court identifier
        case_type_patterns: Case type -> pattern over the peer union
        outcome_analysis: "overall" and each case type -> OutcomeAnalysis
        temporal_patterns: Gap-free peer periods
        sample_size: Peer records aggregated
    """

    court_id: str
    case_type_patterns: Mapping[str, CaseTypePattern]
    outcome_analysis: Mapping[str, OutcomeAnalysis]
    temporal_patterns: tuple[TemporalPeriod, ...]
    sample_size: int

    def __post_init__(self) -> None:
        """Freeze the mappings, nested ones included."""
        patterns = {
            case_type: replace(p, outcome_breakdown=_frozen(p.outcome_breakdown))
            for case_type, p in self.case_type_patterns.items()
        }
        analyses = {
            scope: replace(a, rates=_frozen(a.rates), category_rates=_frozen(a.category_rates))
            for scope, a in self.outcome_analysis.items()
        }
        periods = tuple(
            replace(p, outcome_rates=_frozen(p.outcome_rates)) for p in self.temporal_patterns
        )
        object.__setattr__(self, "case_type_patterns", MappingProxyType(patterns))
        object.__setattr__(self, "outcome_analysis", MappingProxyType(analyses))
        object.__setattr__(self, "temporal_patterns", periods)

    @property
    def available(self) -> bool:
        """A computed baseline is always usable."""
        return True


@dataclass(frozen=True)
class BaselineUnavailable:
    """Explicit "no baseline available" result.

    Attributes:
        court_id: Court identifier (None when the subject has no court)
        reason: Why no baseline could be built
    """

    court_id: str | None
    reason: str

    @property
    def available(self) -> bool:
        """A missing baseline is never usable."""
        return False
