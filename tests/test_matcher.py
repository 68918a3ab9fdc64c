"""Tests for the proportional matcher."""

import copy
import random

import pytest

from factories import consumption, generation, match

from volume_match import ProportionalMatcher, match as run_match
from volume_match.config import MatcherConfig, MatcherConfigManager
from volume_match.core import MatchRound, MatchingPool, RoundResult, sum_matches
from volume_match.models import LoopTermination
from volume_match.strategies import SiteStrategy
from volume_match.validation import InputValidationError, IterationLimitExceeded


def config(**kwargs) -> MatcherConfigManager:
    return MatcherConfigManager.from_config(MatcherConfig(**kwargs))


@pytest.fixture
def matcher() -> ProportionalMatcher:
    return ProportionalMatcher(config())


class TestBasicMatching:
    def test_empty_input(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match([], [])

        assert result.matches == []
        assert result.leftover_consumptions == []
        assert result.leftover_generations == []

    def test_one_to_one(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match([consumption("c1", 24)], [generation("g1", 24)])

        assert result.matches == [match("c1", "g1", 24)]
        assert result.leftover_consumptions == []
        assert result.leftover_generations == []

    def test_one_to_two(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [consumption("c1", 36)], [generation("g1", 24), generation("g2", 12)]
        )

        assert result.matches == [match("c1", "g1", 24), match("c1", "g2", 12)]

    def test_two_to_one(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [consumption("c1", 12), consumption("c2", 12)], [generation("g1", 24)]
        )

        assert result.matches == [match("c1", "g1", 12), match("c2", "g1", 12)]

    def test_two_to_two(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [consumption("c1", 12), consumption("c2", 12)],
            [generation("g1", 12), generation("g2", 12)],
        )

        assert result.matches == [
            match("c1", "g1", 6),
            match("c1", "g2", 6),
            match("c2", "g1", 6),
            match("c2", "g2", 6),
        ]

    def test_consumption_leftover(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match([consumption("c1", 24)], [generation("g1", 12)])

        assert result.matches == [match("c1", "g1", 12)]
        assert result.leftover_consumptions == [consumption("c1", 12)]
        assert result.leftover_generations == []

    def test_generation_leftover(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match([consumption("c1", 12)], [generation("g1", 24)])

        assert result.matches == [match("c1", "g1", 12)]
        assert result.leftover_consumptions == []
        assert result.leftover_generations == [generation("g1", 12)]

    def test_fractional_split_between_consumers(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [consumption("c1", 10), consumption("c2", 10), consumption("c3", 10)],
            [generation("g1", 20)],
        )

        assert result.matches == [
            match("c1", "g1", 7),
            match("c2", "g1", 7),
            match("c3", "g1", 6),
        ]
        assert result.leftover_consumptions == [
            consumption("c1", 3),
            consumption("c2", 3),
            consumption("c3", 4),
        ]

    def test_module_level_match(self) -> None:
        result = run_match([consumption("c1", 5)], [generation("g1", 5)], config())
        assert result.matches == [match("c1", "g1", 5)]


class TestLargeVolumeDifferences:
    def test_small_consumer_takes_from_large_generator(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [consumption("c1", 10)], [generation("g1", 100_000), generation("g2", 10)]
        )

        assert result.matches == [match("c1", "g1", 10)]
        assert result.leftover_generations == [generation("g1", 99_990), generation("g2", 10)]

    def test_remainder_goes_to_largest_generator(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [consumption("c1", 100)],
            [
                generation("g1", 10),
                generation("g2", 5_000_000),
                generation("g3", 7_000_000),
                generation("g4", 20),
            ],
        )

        assert result.matches == [match("c1", "g2", 41), match("c1", "g3", 59)]
        assert result.leftover_generations == [
            generation("g1", 10),
            generation("g2", 4_999_959),
            generation("g3", 6_999_941),
            generation("g4", 20),
        ]


class TestStrategyOrder:
    def test_every_priority_matches_on_site(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [consumption("c1", 30, priorities={"pv": 2, "wind": 1})],
            [generation("g1", 10, energy_type="wind"), generation("g2", 20, energy_type="coal")],
        )

        assert result.matches == [match("c1", "g1", 10), match("c1", "g2", 20)]
        assert result.strategy_results[0].strategy_name == "Site"
        assert result.strategy_results[0].total_volume == 30

    def test_site_before_region(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [consumption("c1", 36, site_id="s1")],
            [generation("g1", 24, site_id="s1"), generation("g2", 36, site_id="s2")],
        )

        assert result.matches == [match("c1", "g1", 24), match("c1", "g2", 12)]
        assert result.leftover_generations == [generation("g2", 24, site_id="s2")]
        by_name = {r.strategy_name: r for r in result.strategy_results}
        assert by_name["Site"].matches == [match("c1", "g1", 24)]
        assert by_name["Energy priority (level: 1, predicate: sameRegion)"].matches == [
            match("c1", "g2", 12)
        ]

    def test_region_before_country(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [consumption("c1", 36, site_id="s1", region_id="r1")],
            [
                generation("g1", 24, site_id="s2", region_id="r1"),
                generation("g2", 36, site_id="s3", region_id="r2"),
            ],
        )

        assert result.matches == [match("c1", "g1", 24), match("c1", "g2", 12)]
        assert result.leftover_generations == [
            generation("g2", 24, site_id="s3", region_id="r2")
        ]

    def test_country_before_other_countries(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [consumption("c1", 48, country_id="country1", by_region=False)],
            [
                generation("g1", 36, site_id="s2", country_id="country1"),
                generation("g2", 36, site_id="s3", country_id="country2"),
            ],
        )

        assert result.matches == [match("c1", "g1", 36), match("c1", "g2", 12)]
        assert result.leftover_generations == [
            generation("g2", 24, site_id="s3", country_id="country2")
        ]

    def test_higher_priority_first(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [consumption("c1", 10, site_id="s1", priorities={"wind": 2, "pv": 1})],
            [
                generation("g1", 10, energy_type="pv", site_id="s2"),
                generation("g2", 10, energy_type="wind", site_id="s3"),
            ],
        )

        assert result.matches == [match("c1", "g2", 10)]
        assert result.leftover_generations == [generation("g1", 10, site_id="s2")]

    def test_strategy_names_in_run_order(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [
                consumption("c1", 1, priorities={"pv": 1}),
                consumption("c2", 1, priorities={"pv": 3}),
            ],
            [],
        )

        assert [r.strategy_name for r in result.strategy_results] == [
            "Site",
            "Energy priority (level: 3, predicate: sameRegion)",
            "Energy priority (level: 1, predicate: sameRegion)",
            "Energy priority (level: 3, predicate: sameCountry)",
            "Energy priority (level: 1, predicate: sameCountry)",
            "Energy priority (level: 3, predicate: otherCountry)",
            "Energy priority (level: 1, predicate: otherCountry)",
        ]

    def test_no_eligible_path_leaves_everything(self, matcher: ProportionalMatcher) -> None:
        c1 = consumption("c1", 10, priorities={}, site_id="s1")
        g1 = generation("g1", 10, site_id="s2")

        result = matcher.match([c1], [g1])

        assert result.matches == []
        assert result.leftover_consumptions == [c1]
        assert result.leftover_generations == [g1]
        assert [r.strategy_name for r in result.strategy_results] == ["Site"]

    def test_opted_out_consumer_keeps_volume(self, matcher: ProportionalMatcher) -> None:
        c1 = consumption(
            "c1", 10, site_id="s1", by_region=False, by_country=False, by_other_countries=False
        )
        g1 = generation("g1", 10, site_id="s2")

        result = matcher.match([c1], [g1])

        assert result.matches == []
        assert result.leftover_consumptions == [c1]


class TestCartesianFallback:
    @pytest.fixture
    def entities(self):
        consumptions = [
            consumption("c1", 24, priorities={}, site_id="sc1"),
            consumption("c2", 12, priorities={}, site_id="sc2"),
        ]
        generations = [
            generation("g1", 10, site_id="sg1"),
            generation("g2", 20, site_id="sg2"),
        ]
        return consumptions, generations

    def test_disabled_by_default(self, entities) -> None:
        result = ProportionalMatcher(config()).match(*entities)

        assert result.matches == []
        assert [r.strategy_name for r in result.strategy_results] == ["Site"]

    def test_matches_everything_that_remains(self, entities) -> None:
        result = ProportionalMatcher(config(cartesian_fallback=True)).match(*entities)

        assert result.matches == [
            match("c1", "g1", 7),
            match("c1", "g2", 14),
            match("c2", "g1", 3),
            match("c2", "g2", 6),
        ]
        assert result.leftover_consumptions == [
            consumption("c1", 3, priorities={}, site_id="sc1"),
            consumption("c2", 3, priorities={}, site_id="sc2"),
        ]
        assert result.leftover_generations == []

        cartesian = result.strategy_results[-1]
        assert cartesian.strategy_name == "Cartesian product"
        assert cartesian.rounds == 2


class TestValidation:
    def test_fractional_volume_raises(self, matcher: ProportionalMatcher) -> None:
        with pytest.raises(InputValidationError) as exc_info:
            matcher.match(
                [{"id": "c1", "volume": 10.5, "siteId": "s1", "regionId": "r1", "countryId": "c1"}],
                [generation("g1", 10)],
            )

        assert exc_info.value.entity_ids == ["c1"]

    def test_fractional_volume_of_one_hundredth(self, matcher: ProportionalMatcher) -> None:
        with pytest.raises(InputValidationError):
            matcher.match(
                [consumption("c1", 1)],
                [{"id": "g1", "volume": 1.01, "siteId": "s1", "regionId": "r1",
                  "countryId": "c1", "energyType": "pv"}],
            )

    def test_mapping_input_is_not_modified(self, matcher: ProportionalMatcher) -> None:
        consumptions = [{
            "id": "c1", "volume": 10, "siteId": "s1", "regionId": "r1", "countryId": "c1",
        }]
        generations = [{
            "id": "g1", "volume": 4, "siteId": "s1", "regionId": "r1", "countryId": "c1",
            "energyType": "pv",
        }]
        before = copy.deepcopy((consumptions, generations))

        result = matcher.match(consumptions, generations)

        assert result.matches == [match("c1", "g1", 4)]
        assert (consumptions, generations) == before


class _EndlessRound(MatchRound):
    """Round that always claims one unit, so the strategy never runs dry."""

    def __init__(self) -> None:
        self.calls = 0

    def execute(self, consumptions, generations, paths):
        self.calls += 1
        return RoundResult(matches=[match("c1", "g1", 1)])


class TestIterationLimit:
    def test_raises_when_rounds_keep_matching(self) -> None:
        endless = _EndlessRound()
        matcher = ProportionalMatcher(config(max_iterations=25), match_round=endless)

        with pytest.raises(IterationLimitExceeded) as exc_info:
            matcher.match([consumption("c1", 10**9)], [generation("g1", 10**9)])

        assert endless.calls == 25
        assert exc_info.value.max_iterations == 25
        assert exc_info.value.strategy_name == "Site"
        assert "25 iterations" in str(exc_info.value)

    def test_default_ceiling(self) -> None:
        endless = _EndlessRound()
        matcher = ProportionalMatcher(config(), match_round=endless)

        with pytest.raises(IterationLimitExceeded) as exc_info:
            matcher.match([consumption("c1", 10**9)], [generation("g1", 10**9)])

        assert endless.calls == 50_000
        assert exc_info.value.max_iterations == 50_000

    def test_run_until_exhausted_reports_termination(self) -> None:
        matcher = ProportionalMatcher(config())
        pool = MatchingPool([consumption("c1", 10)], [generation("g1", 4)])

        run = matcher.run_until_exhausted(SiteStrategy(), pool)

        assert run.termination == LoopTermination.EXHAUSTED
        assert run.rounds == 2
        assert run.matches == [match("c1", "g1", 4)]

    def test_run_until_exhausted_limit(self) -> None:
        matcher = ProportionalMatcher(config(max_iterations=3), match_round=_EndlessRound())
        pool = MatchingPool([consumption("c1", 100)], [generation("g1", 100)])

        run = matcher.run_until_exhausted(SiteStrategy(), pool)

        assert run.termination == LoopTermination.LIMIT_EXCEEDED
        assert run.rounds == 3
        assert pool.get_volume("c1") == 97


def _random_entities(seed: int):
    rng = random.Random(seed)
    sites = ["s1", "s2", "s3", "s4"]
    regions = ["r1", "r2"]
    countries = ["c1", "c2"]
    energy_types = ["pv", "wind", "hydro"]

    consumptions = [
        consumption(
            f"c{i}",
            rng.randint(0, 500),
            priorities={t: rng.randint(1, 3) for t in rng.sample(energy_types, rng.randint(0, 3))},
            site_id=rng.choice(sites),
            region_id=rng.choice(regions),
            country_id=rng.choice(countries),
            by_region=rng.random() < 0.7,
            by_country=rng.random() < 0.6,
            by_other_countries=rng.random() < 0.4,
        )
        for i in range(12)
    ]
    generations = [
        generation(
            f"g{i}",
            rng.randint(0, 800),
            energy_type=rng.choice(energy_types),
            site_id=rng.choice(sites),
            region_id=rng.choice(regions),
            country_id=rng.choice(countries),
        )
        for i in range(8)
    ]
    return consumptions, generations


class TestMatchingProperties:
    @pytest.mark.parametrize("seed", range(10))
    @pytest.mark.parametrize("cartesian_fallback", [False, True])
    def test_volume_is_conserved(self, seed: int, cartesian_fallback: bool) -> None:
        consumptions, generations = _random_entities(seed)
        result = ProportionalMatcher(config(cartesian_fallback=cartesian_fallback)).match(
            consumptions, generations
        )

        leftover_consumed = {e.id: e.volume for e in result.leftover_consumptions}
        leftover_generated = {e.id: e.volume for e in result.leftover_generations}

        for c in consumptions:
            assert result.consumed_volume_for(c.id) + leftover_consumed.get(c.id, 0) == c.volume
        for g in generations:
            assert result.generated_volume_for(g.id) + leftover_generated.get(g.id, 0) == g.volume

        assert all(m.volume > 0 for m in result.matches)
        assert all(e.volume > 0 for e in result.leftover_consumptions)
        assert all(e.volume > 0 for e in result.leftover_generations)
        assert len({m.pair for m in result.matches}) == len(result.matches)
        assert sum_matches(result.matches) == result.matches
        assert result.total_matched_volume == sum(
            r.total_volume for r in result.strategy_results
        )

    @pytest.mark.parametrize("seed", range(5))
    def test_deterministic_output(self, seed: int) -> None:
        consumptions, generations = _random_entities(seed)

        first = ProportionalMatcher(config()).match(consumptions, generations)
        second = ProportionalMatcher(config()).match(consumptions, generations)

        assert first.to_json() == second.to_json()

    def test_cartesian_fallback_matches_all_it_can(self) -> None:
        consumptions, generations = _random_entities(3)
        result = ProportionalMatcher(config(cartesian_fallback=True)).match(
            consumptions, generations
        )

        assert not (result.leftover_consumptions and result.leftover_generations)


class TestEntityIdentity:
    def test_ids_and_keys_are_kept_verbatim(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [consumption("c1 ", 10, priorities={}, site_id="s1")],
            [generation("g1", 4, site_id="s1")],
        )

        assert [m.pair for m in result.matches] == [("c1 ", "g1")]
        assert [c.id for c in result.leftover_consumptions] == ["c1 "]
        assert result.leftover_consumptions[0].site_id == "s1"

    def test_keys_differing_by_whitespace_stay_distinct(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [
                consumption("a", 10, priorities={}, site_id=" s1", region_id="r1", country_id="c1"),
                consumption("a ", 5, priorities={}, site_id="s2"),
            ],
            [generation("g1", 4, site_id="s1", region_id="r2", country_id="c2")],
        )

        assert result.matches == []
        assert [c.id for c in result.leftover_consumptions] == ["a", "a "]
        assert result.leftover_consumptions[0].site_id == " s1"

    def test_leftovers_do_not_share_state_with_input(self, matcher: ProportionalMatcher) -> None:
        c1 = consumption(
            "c1", 10, site_id="s1", by_region=False, by_country=False, by_other_countries=False
        )

        result = matcher.match([c1], [generation("g1", 10, site_id="s2")])

        leftover = result.leftover_consumptions[0]
        assert leftover == c1
        assert leftover is not c1
        assert leftover.energy_priorities is not c1.energy_priorities


class TestFractionalPriorities:
    def test_fractional_tier_runs_between_integer_tiers(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [consumption("c1", 10, site_id="s1", priorities={"pv": 1, "wind": 1.5, "hydro": 2})],
            [
                generation("g1", 10, energy_type="pv", site_id="s2"),
                generation("g2", 10, energy_type="wind", site_id="s3"),
            ],
        )

        assert result.matches == [match("c1", "g2", 10)]
        assert [r.strategy_name for r in result.strategy_results][:4] == [
            "Site",
            "Energy priority (level: 2, predicate: sameRegion)",
            "Energy priority (level: 1.5, predicate: sameRegion)",
            "Energy priority (level: 1, predicate: sameRegion)",
        ]
        assert result.strategy_results[2].matches == [match("c1", "g2", 10)]

    def test_fractional_priority_from_mapping(self, matcher: ProportionalMatcher) -> None:
        result = matcher.match(
            [{
                "id": "c1", "volume": 6, "siteId": "s1", "regionId": "r1", "countryId": "c1",
                "energyPriorities": [{"energyType": "pv", "priority": 1.5}],
                "shouldMatchByRegion": True,
            }],
            [generation("g1", 6, site_id="s2")],
        )

        assert result.matches == [match("c1", "g1", 6)]
