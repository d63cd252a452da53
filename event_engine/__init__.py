"""
Enrichment, correlation and ranking of DONKI space-weather events.

Raw CME records are enriched with an Earth impact score, flares and
interplanetary shocks are linked to the enriched CMEs they reference, and
the CMEs are split into an Earth-directed list and everything else.
"""

from event_engine.correlation import correlate
from event_engine.enrichment import enrich, enrich_all
from event_engine.ranking import partition

__all__ = ["correlate", "enrich", "enrich_all", "partition"]
