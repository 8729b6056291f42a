import pytest

from highscores.services.store import MemoryStore, ScoreStore, SQLModelStore


def test_store_missing_operations_cannot_be_constructed():
    class HalfStore(ScoreStore):
        def get_score(self, key):
            return None

    with pytest.raises(TypeError):
        HalfStore()


def test_both_backends_implement_every_operation():
    assert not MemoryStore.__abstractmethods__
    assert not SQLModelStore.__abstractmethods__


def test_save_best_score_inserts_then_only_raises(store):
    assert store.save_best_score("abc", 10, 1)
    assert not store.save_best_score("abc", 10, 2)
    assert not store.save_best_score("abc", 5, 3)
    assert store.save_best_score("abc", 15, 4)

    record = store.get_score("abc")
    assert (record.score, record.timestamp) == (15, 4)
    assert store.count_scores() == 1


def test_top_scores_orders_by_score_then_insertion(store):
    for name, score in [("aaa", 5), ("bbb", 9), ("ccc", 5), ("ddd", 7)]:
        store.save_best_score(name, score, 0)

    assert [r.name for r in store.top_scores(10)] == ["bbb", "ddd", "aaa", "ccc"]
    assert [r.name for r in store.top_scores(2)] == ["bbb", "ddd"]
    assert store.top_scores(0) == []


def test_rank_uses_row_numbers_on_ties(store):
    for name, score in [("aaa", 5), ("bbb", 9), ("ccc", 5)]:
        store.save_best_score(name, score, 0)

    assert store.rank_of("bbb") == (1, 3)
    assert store.rank_of("aaa") == (2, 3)
    assert store.rank_of("ccc") == (3, 3)
    assert store.rank_of("zzz") == (None, 3)


def test_updated_score_keeps_its_insertion_slot_for_ties(store):
    store.save_best_score("aaa", 1, 0)
    store.save_best_score("bbb", 8, 0)
    store.save_best_score("aaa", 8, 1)

    assert [r.name for r in store.top_scores(10)] == ["aaa", "bbb"]


def test_activity_lifecycle(store):
    assert store.get_activity("abc") is None

    created = store.create_activity("abc", 100, "sess")
    assert created.submission_count == 1
    assert created.first_seen == created.last_submission == 100

    store.touch_activity("abc", 250)
    activity = store.get_activity("abc")
    assert activity.last_submission == 250
    assert activity.submission_count == 2
    assert activity.first_seen == 100
    assert activity.session_id == "sess"


def test_returned_records_are_detached_copies(store):
    store.save_best_score("abc", 10, 0)
    record = store.get_score("abc")
    record.score = 999

    assert store.get_score("abc").score == 10


def test_initialize_reset_clears_data(store):
    store.save_best_score("abc", 10, 0)
    store.create_activity("abc", 0, "sess")

    store.initialize(reset=True)

    assert store.count_scores() == 0
    assert store.get_activity("abc") is None
