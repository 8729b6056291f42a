import threading

import pytest
from sqlalchemy.exc import OperationalError

from highscores.services import LeaderboardService, RejectionKind
from highscores.services.leaderboard import (
    INVALID_NAME_MESSAGE,
    INVALID_SCORE_MESSAGE,
    PlayerLocks,
    SAVED_MESSAGE,
)

from conftest import COOLDOWN_MS


def test_walkthrough_submit_reject_improve(service, clock):
    first = service.submit_score("abc", 10)
    assert first.success and first.message == SAVED_MESSAGE
    assert [(r.name, r.score) for r in service.get_top_scores()] == [("abc", 10)]

    clock.advance(COOLDOWN_MS)
    lower = service.submit_score("abc", 5)
    assert not lower.success
    assert "must exceed personal best of 10" in lower.error
    assert lower.status_code == 400

    clock.advance(COOLDOWN_MS)
    better = service.submit_score("abc", 15)
    assert better.success
    assert [(r.name, r.score) for r in service.get_top_scores()] == [("abc", 15)]


def test_same_score_twice_fails_on_progression(service, clock):
    assert service.submit_score("newbie", 42).success
    clock.advance(COOLDOWN_MS)

    again = service.submit_score("newbie", 42)

    assert again.kind is RejectionKind.NOT_PROGRESSING


def test_names_are_case_folded(service, clock):
    service.submit_score("  PlayerOne ", 20)
    clock.advance(COOLDOWN_MS)
    result = service.submit_score("playerone", 20)

    assert result.kind is RejectionKind.NOT_PROGRESSING
    assert [r.name for r in service.get_top_scores()] == ["playerone"]
    assert service.get_rank("PLAYERONE").rank == 1


@pytest.mark.parametrize("name", [None, 12345, "", "ab", "bad name!", "x" * 17])
def test_invalid_name_is_rejected_before_rate_limiting(service, store, name):
    result = service.submit_score(name, 10)

    assert result.error == INVALID_NAME_MESSAGE
    assert result.kind is RejectionKind.INVALID_INPUT
    assert result.status_code == 400
    assert store.count_scores() == 0


@pytest.mark.parametrize("score", [None, 0, -5, 3601, 12.5, "100", True])
def test_invalid_score_does_not_consume_rate_limit(service, store, score):
    result = service.submit_score("abc", score)

    assert result.error == INVALID_SCORE_MESSAGE
    assert store.get_activity("abc") is None


def test_cooldown_denial_is_reported_and_nothing_stored(service, store, clock):
    service.submit_score("abc", 10)
    clock.advance(1_000)

    result = service.submit_score("abc", 20)

    assert result.kind is RejectionKind.RATE_LIMITED
    assert result.status_code == 429
    assert result.to_dict() == {"success": False, "error": result.error}
    assert store.get_score("abc").score == 10


def test_progression_rejection_still_consumes_an_attempt(service, store, clock):
    service.submit_score("abc", 10)
    clock.advance(COOLDOWN_MS)
    service.submit_score("abc", 3)

    assert store.get_activity("abc").submission_count == 2


def test_fifty_first_submission_hits_daily_quota(service, clock):
    for score in range(1, 51):
        assert service.submit_score("grinder", score).success
        clock.advance(COOLDOWN_MS)

    result = service.submit_score("grinder", 51)

    assert result.kind is RejectionKind.RATE_LIMITED
    assert "Daily quota" in result.error


def test_top_scores_is_truncated_and_sorted(service):
    for index in range(15):
        service.submit_score(f"player_{index:02d}", (index * 37) % 100 + 1)

    top = service.get_top_scores(10)

    assert len(top) == 10
    scores = [record.score for record in top]
    assert scores == sorted(scores, reverse=True)


def test_rank_of_unknown_player_reports_total(service):
    for index in range(4):
        service.submit_score(f"player_{index}", index + 1)

    result = service.get_rank("ghost")

    assert result.rank is None
    assert result.total_players == 4
    assert result.to_dict() == {"success": True, "rank": None, "totalPlayers": 4}


def test_rank_counts_from_best_score(service):
    service.submit_score("low", 1)
    service.submit_score("high", 99)
    service.submit_score("mid", 50)

    assert service.get_rank("high").rank == 1
    assert service.get_rank("mid").rank == 2
    assert service.get_rank("low").rank == 3


def test_lost_race_is_reported_as_progression(service, store, clock):
    service.submit_score("abc", 10)
    clock.advance(COOLDOWN_MS)

    original = store.save_best_score

    def racing_save(key, score, timestamp):
        original(key, 500, timestamp)
        return original(key, score, timestamp)

    store.save_best_score = racing_save
    result = service.submit_score("abc", 20)

    assert result.kind is RejectionKind.NOT_PROGRESSING
    assert "500" in result.error
    assert store.get_score("abc").score == 500


def test_store_faults_propagate(clock):
    class BrokenStore:
        def get_activity(self, key):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

    service = LeaderboardService(BrokenStore(), clock=clock)

    with pytest.raises(OperationalError):
        service.submit_score("abc", 10)


def test_player_locks_serialise_same_name_only():
    locks = PlayerLocks()
    entered = threading.Event()
    release = threading.Event()
    other_done = threading.Event()

    def hold_abc():
        with locks.hold("abc"):
            entered.set()
            release.wait(timeout=5)

    def use_xyz():
        with locks.hold("xyz"):
            other_done.set()

    holder = threading.Thread(target=hold_abc)
    holder.start()
    assert entered.wait(timeout=5)

    other = threading.Thread(target=use_xyz)
    other.start()
    assert other_done.wait(timeout=5)

    release.set()
    holder.join(timeout=5)
    other.join(timeout=5)
    assert len(locks) == 0


def test_concurrent_submissions_for_one_player_keep_the_best(store):
    service = LeaderboardService(store, clock=lambda: 0)
    service.guard.cooldown_ms = 0
    scores = list(range(1, 41))
    threads = [
        threading.Thread(target=service.submit_score, args=("racer", score))
        for score in scores
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert store.get_score("racer").score == max(scores)
    assert store.count_scores() == 1


def test_whole_number_float_is_stored_as_int(service, store, clock):
    assert service.submit_score("floaty", 10.0).success
    record = store.get_score("floaty")
    assert record.score == 10 and type(record.score) is int

    clock.advance(COOLDOWN_MS)
    assert service.submit_score("floaty", 10).kind is RejectionKind.NOT_PROGRESSING
