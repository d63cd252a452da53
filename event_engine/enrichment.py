"""
CME enrichment: rank each CME by how likely it is to reach Earth.

`enrich` is a pure function of its input. It picks the analysis to show
(the first one flagged most accurate, else the first one in feed order),
then walks an ordered decision list over that analysis' ENLIL runs:

    1  Earth-directed simulation with an estimated shock arrival time
    2  Earth-directed simulation without an arrival time
    3  analysis note mentions Earth and some simulation lists impacts
    4  any ENLIL simulation at all
    inf  nothing to go on

The first rule that matches decides the score; rules never combine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from event_engine.records import (
    CME,
    EARTH_GEOSPACE,
    NOT_EARTH_RELEVANT,
    CMEAnalysis,
    EnhancedCME,
    EnlilSimulation,
)

EARTH_LOCATION = "Earth"


@dataclass(frozen=True)
class ImpactAssessment:
    score: float = NOT_EARTH_RELEVANT
    arrival_time: Optional[str] = None
    duration: Optional[float] = None
    impact_locations: Optional[Tuple[str, ...]] = None


def mentions_earth(text: Optional[str]) -> bool:
    return bool(text) and "earth" in text.lower()


def is_potentially_earth_relevant(cme: CME) -> bool:
    return any(
        analysis.is_most_accurate
        or bool(analysis.enlil_simulations)
        or mentions_earth(analysis.note)
        for analysis in cme.analyses or ()
    )


def select_relevant_analysis(cme: CME) -> Optional[CMEAnalysis]:
    # Multiple most-accurate flags are an upstream data issue; take the first.
    for analysis in cme.analyses or ():
        if analysis.is_most_accurate:
            return analysis
    return cme.analyses[0] if cme.analyses else None


def is_earth_directed_simulation(simulation: EnlilSimulation) -> bool:
    if simulation.is_earth_geomagnetic is True:
        return True
    return any(impact.location == EARTH_LOCATION for impact in simulation.impact_list or ())


def earth_directed_simulations(analysis: CMEAnalysis) -> List[EnlilSimulation]:
    return [sim for sim in analysis.enlil_simulations or () if is_earth_directed_simulation(sim)]


def _impact_locations(simulation: EnlilSimulation) -> Tuple[str, ...]:
    if simulation.impact_list is not None:
        return tuple(impact.location for impact in simulation.impact_list if impact.location)
    if simulation.is_earth_geomagnetic:
        return (EARTH_GEOSPACE,)
    return ()


def assess_impact(analysis: CMEAnalysis) -> ImpactAssessment:
    earth_sims = earth_directed_simulations(analysis)
    if earth_sims:
        primary = earth_sims[0]
        if primary.estimated_shock_arrival_time:
            return ImpactAssessment(
                score=1,
                arrival_time=primary.estimated_shock_arrival_time,
                duration=primary.estimated_duration,
                impact_locations=_impact_locations(primary),
            )
        return ImpactAssessment(
            score=2,
            duration=primary.estimated_duration,
            impact_locations=_impact_locations(primary),
        )

    if mentions_earth(analysis.note):
        with_impacts = next((sim for sim in analysis.enlil_simulations or () if sim.impact_list), None)
        if with_impacts is not None:
            return ImpactAssessment(score=3, arrival_time=with_impacts.impact_list[0].arrival_time)

    if analysis.enlil_simulations:
        return ImpactAssessment(score=4)

    return ImpactAssessment()


def enrich(cme: CME) -> EnhancedCME:
    """Return an EnhancedCME for `cme`; never raises on sparse records."""
    relevant = is_potentially_earth_relevant(cme)
    analysis = select_relevant_analysis(cme)
    if analysis is None:
        return EnhancedCME.from_cme(cme, is_potentially_earth_directed=relevant)

    assessment = assess_impact(analysis)
    return EnhancedCME.from_cme(
        cme,
        earth_impact_score=assessment.score,
        display_analysis_speed=analysis.speed,
        display_analysis_half_angle=analysis.half_angle,
        display_analysis_type=analysis.type,
        display_analysis_note=analysis.note,
        display_enlil_arrival_time=assessment.arrival_time,
        display_enlil_duration=assessment.duration,
        display_enlil_impact_locations=assessment.impact_locations,
        is_potentially_earth_directed=relevant,
    )


def enrich_all(cmes: Iterable[CME]) -> List[EnhancedCME]:
    return [enrich(cme) for cme in cmes]
