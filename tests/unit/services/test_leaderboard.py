import pytest

from factdesk.core.exceptions import ValidationError
from factdesk.services.leaderboard import (
    PerformanceRow,
    fast_resolution_score,
    rank,
    verdict_count_score,
)


def row(fc_id, count, average):
    return PerformanceRow(fact_checker_id=fc_id, user_id=f"user-{fc_id}", verdict_count=count, average_resolution_time=average)


class TestRank:
    def test_higher_count_ranks_first(self):
        ranked = rank([row("a", 2, 100.0), row("b", 5, 900.0)], verdict_count_score)
        assert [r["fact_checker_id"] for r in ranked] == ["b", "a"]
        assert [r["rank"] for r in ranked] == [1, 2]

    def test_ties_go_to_faster_average(self):
        ranked = rank([row("a", 3, 900.0), row("b", 3, 300.0)], verdict_count_score)
        assert [r["fact_checker_id"] for r in ranked] == ["b", "a"]

    def test_missing_average_sorts_last_then_id(self):
        ranked = rank([row("c", 0, None), row("b", 0, None), row("a", 0, 50.0)], verdict_count_score)
        assert [r["fact_checker_id"] for r in ranked] == ["a", "b", "c"]

    def test_fast_resolution_rewards_speed(self):
        quick = row("quick", 4, 1800.0)
        slow = row("slow", 6, 86400.0)
        assert fast_resolution_score(quick) > fast_resolution_score(slow)
        ranked = rank([slow, quick], fast_resolution_score)
        assert ranked[0]["fact_checker_id"] == "quick"

    def test_fast_resolution_without_verdicts_is_zero(self):
        assert fast_resolution_score(row("a", 0, None)) == 0.0


class TestCompute:
    def _decide(self, make_claim, fact_checkers, ledger, moderator, clock, checker, minutes, outcome="false"):
        claim = make_claim()
        fact_checkers.assign(claim.id, checker.id, moderator)
        clock.advance(minutes=minutes)
        ledger.record(claim.id, checker.id, outcome, "Reviewed")
        return claim

    def test_ranks_approved_checkers_by_current_verdicts(
        self, leaderboard, make_claim, make_checker, fact_checkers, ledger, moderator, clock, claim_store
    ):
        top = make_checker()
        runner_up = make_checker()
        idle = make_checker()
        make_checker(approve=False)

        for _ in range(2):
            self._decide(make_claim, fact_checkers, ledger, moderator, clock, top, 10)
        reopened = self._decide(make_claim, fact_checkers, ledger, moderator, clock, runner_up, 5)
        self._decide(make_claim, fact_checkers, ledger, moderator, clock, runner_up, 5)
        # superseded verdicts no longer count
        claim_store.update_status(reopened.id, "human_review", moderator)

        entries = leaderboard.compute(timeframe="30 days", score="verdict_count")
        assert [e["fact_checker_id"] for e in entries] == [top.id, runner_up.id, idle.id]
        assert [e["verdict_count"] for e in entries] == [2, 1, 0]
        assert entries[0]["average_resolution_time"] == pytest.approx(600.0)
        assert entries[2]["average_resolution_time"] is None

    def test_fast_resolution_score(self, leaderboard, make_claim, make_checker, fact_checkers, ledger, moderator, clock):
        steady = make_checker()
        speedy = make_checker()
        for _ in range(2):
            self._decide(make_claim, fact_checkers, ledger, moderator, clock, steady, 60 * 24)
        self._decide(make_claim, fact_checkers, ledger, moderator, clock, speedy, 1)

        by_count = leaderboard.compute(timeframe="all", score="verdict_count")
        by_speed = leaderboard.compute(timeframe="all", score="fast_resolution")
        assert by_count[0]["fact_checker_id"] == steady.id
        assert by_speed[0]["fact_checker_id"] == speedy.id

    def test_timeframe_excludes_old_verdicts(self, leaderboard, make_claim, make_checker, fact_checkers, ledger, moderator, clock):
        veteran = make_checker()
        self._decide(make_claim, fact_checkers, ledger, moderator, clock, veteran, 1)
        clock.advance(days=40)

        assert leaderboard.compute(timeframe="30 days")[0]["verdict_count"] == 0
        assert leaderboard.compute(timeframe="all")[0]["verdict_count"] == 1

    def test_limit(self, leaderboard, make_checker):
        for _ in range(3):
            make_checker()
        assert len(leaderboard.compute(limit=2)) == 2

    @pytest.mark.parametrize("kwargs", [
        {"score": "popularity"},
        {"timeframe": "a while"},
        {"limit": 0},
    ])
    def test_invalid_parameters(self, leaderboard, kwargs):
        with pytest.raises(ValidationError):
            leaderboard.compute(**kwargs)
