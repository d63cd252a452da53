import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from donki_samples import analysis, cme, enlil, flare, shock, storm
from event_engine.correlation import build_cme_index, correlate
from event_engine.enrichment import enrich
from event_engine.records import (
    CME,
    AssociatedCME,
    GeomagneticStorm,
    InterplanetaryShock,
    SolarFlare,
)


def enriched(activity_id, **kwargs):
    return enrich(CME.from_donki(cme(activity_id, **kwargs)))


def test_flare_links_single_cme():
    cme_a = enriched(
        "A",
        analyses=[analysis(most_accurate=True, enlil_list=[enlil(arrival="2024-03-01T12:00Z", earth_gb=True)])],
    )
    flare_f = SolarFlare.from_donki(flare("F", linked=["A"]))

    result = correlate([flare_f], [cme_a])

    assert len(result[0].associated_cmes) == 1
    assert result[0].associated_cmes[0] == AssociatedCME(
        activity_id="A",
        start_time=cme_a.start_time,
        note=cme_a.note,
        link=cme_a.link,
        earth_impact_score=1,
    )


def test_flare_keeps_only_resolvable_links_in_reference_order():
    cmes = [enriched("CME-1"), enriched("CME-3")]
    flare_f = SolarFlare.from_donki(flare("F", linked=["CME-3", "CME-2", "CME-1"]))

    result = correlate([flare_f], cmes)

    assert [item.activity_id for item in result[0].associated_cmes] == ["CME-3", "CME-1"]


def test_flare_without_links_gets_empty_projection():
    flares = [
        SolarFlare.from_donki(flare("F1", linked=None)),
        SolarFlare.from_donki(flare("F2", linked=["outside-window"])),
    ]

    result = correlate(flares, [enriched("A")])

    assert [item.associated_cmes for item in result] == [(), ()]


def test_shock_takes_first_resolvable_cme_only():
    slow = enriched("slow", start_time="2024-02-28T00:00Z", analyses=[analysis(speed=450.0)])
    fast = enriched("fast", start_time="2024-02-29T00:00Z", analyses=[analysis(speed=1500.0)])
    shock_s = InterplanetaryShock.from_donki(shock("S", linked=["missing", "fast", "slow"]))

    result = correlate([shock_s], [slow, fast])[0]

    assert result.associated_cme_activity_id == "fast"
    assert result.associated_cme_speed == 1500.0
    assert result.associated_cme_start_time == "2024-02-29T00:00Z"
    assert result.associated_cme_link == fast.link


def test_shock_with_unresolved_links_is_unchanged():
    shock_s = InterplanetaryShock.from_donki(shock("S", linked=["before-window"]))

    result = correlate([shock_s], [enriched("A")])

    assert result == [shock_s]
    assert result[0].associated_cme_activity_id is None


def test_mixed_targets_keep_order():
    targets = [
        InterplanetaryShock.from_donki(shock("S", linked=["A"])),
        SolarFlare.from_donki(flare("F", linked=["A"])),
    ]

    result = correlate(targets, [enriched("A")])

    assert isinstance(result[0], InterplanetaryShock)
    assert isinstance(result[1], SolarFlare)
    assert result[0].associated_cme_activity_id == "A"
    assert result[1].associated_cmes[0].activity_id == "A"


def test_duplicate_activity_ids_last_one_wins():
    first = enriched("dup", analyses=[analysis(speed=300.0)])
    second = enriched("dup", analyses=[analysis(speed=600.0)])

    index = build_cme_index([first, second])
    result = correlate([InterplanetaryShock.from_donki(shock("S", linked=["dup"]))], [first, second])

    assert index["dup"] is second
    assert result[0].associated_cme_speed == 600.0


def test_index_is_read_only():
    index = build_cme_index([enriched("A")])

    with pytest.raises(TypeError):
        index["B"] = enriched("B")


def test_correlation_leaves_inputs_untouched():
    cme_a = enriched("A")
    flare_f = SolarFlare.from_donki(flare("F", linked=["A"]))

    correlate([flare_f], [cme_a])

    assert flare_f.associated_cmes == ()
    assert cme_a == enriched("A")


def test_unsupported_record_kind_is_rejected():
    with pytest.raises(TypeError):
        correlate([GeomagneticStorm.from_donki(storm("G"))], [])
