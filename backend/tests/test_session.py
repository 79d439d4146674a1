import pytest

from matchgame.services.games import events
from matchgame.services.games.session import LOST, NOT_STARTED, RUNNING, WON


def of_type(received, cls):
    return [e for e in received if isinstance(e, cls)]


def first_active(session):
    return next(p for p in session.pairs.pairs if p.status == 'active')


def match_one(session):
    pair = first_active(session)
    session.select_tile(pair.id, 'calc')
    session.select_tile(pair.id, 'answer')
    session.scheduler.advance(session.rules.match_remove_delay_ms / 1000.0)
    return pair


def test_fresh_session_fills_board(session, received):
    assert session.state == NOT_STARTED
    session.start()
    assert session.state == RUNNING
    assert len(session.pairs) == 8
    assert session.board.occupied_count() == 16
    assert session.board.empty_slots() == []
    assert session.score == 0
    assert session.time_left == 60

    assert isinstance(received[0], events.GameStarted)
    assert len(of_type(received, events.PairAdded)) == 8
    assert of_type(received, events.ScoreChanged) == [events.ScoreChanged(score=0)]
    assert received[-1] == events.TimerTick(time_left=60, urgency='normal', progress=1.0)


def test_clicks_before_start_are_ignored(session, received):
    assert session.select_tile(0, 'calc') is None
    assert received == []


def test_unknown_role_is_rejected(session):
    session.start()
    with pytest.raises(ValueError):
        session.select_tile(first_active(session).id, 'banana')


def test_first_click_prompts_for_the_other_role(session, received):
    session.start()
    pair = first_active(session)
    del received[:]
    assert session.select_tile(pair.id, 'calc') == 'selected'
    assert received == [events.TileSelected(
        pair_id=pair.id, role='calc', label=pair.label,
        message=f'"{pair.label}" selecionado — agora clique na resposta!',
    )]


def test_matching_pair_scores_and_is_replaced(session, received):
    session.start()
    pair = first_active(session)
    session.select_tile(pair.id, 'calc')
    assert session.select_tile(pair.id, 'answer') == 'matched'

    assert of_type(received, events.MatchSucceeded) == [events.MatchSucceeded(pair_id=pair.id)]
    assert of_type(received, events.MatchFailed) == []
    assert session.score == 2
    assert pair.status == 'matched'
    # still on the board until the removal delay has passed
    assert session.pairs.find_active(pair.id) is pair

    del received[:]
    session.scheduler.advance(0.6)
    assert received[0] == events.PairRemoved(pair_id=pair.id)
    added = of_type(received, events.PairAdded)
    assert len(added) == 1
    assert added[0].pair['id'] > pair.id
    assert len(session.pairs) == 8
    assert session.board.occupied_count() == 16


def test_matched_pair_ignores_clicks_until_removed(session, received):
    session.start()
    pair = first_active(session)
    session.select_tile(pair.id, 'answer')
    session.select_tile(pair.id, 'calc')
    del received[:]
    assert session.select_tile(pair.id, 'calc') is None
    assert received == []


def test_mismatch_keeps_both_pairs_active(session, received):
    session.start()
    p1, p2 = session.pairs.pairs[:2]
    session.select_tile(p1.id, 'calc')
    assert session.select_tile(p2.id, 'answer') == 'mismatched'

    failed = of_type(received, events.MatchFailed)
    assert len(failed) == 1
    assert (failed[0].pair_id1, failed[0].pair_id2) == (p1.id, p2.id)
    assert of_type(received, events.MatchSucceeded) == []
    assert p1.status == p2.status == 'active'
    assert session.engine.idle
    assert session.score == 0

    session.scheduler.advance(0.7)
    assert of_type(received, events.WrongCleared) == [events.WrongCleared(pair_id1=p1.id, pair_id2=p2.id)]


def test_same_tile_twice_returns_to_idle(session, received):
    session.start()
    pair = first_active(session)
    session.select_tile(pair.id, 'answer')
    assert session.select_tile(pair.id, 'answer') == 'cleared'
    assert session.engine.idle
    assert session.score == 0
    assert of_type(received, events.SelectionCleared) == [events.SelectionCleared()]


def test_bonus_fires_once_per_five_matches(session, received):
    session.start()
    for _ in range(4):
        match_one(session)
    assert of_type(received, events.BonusGranted) == []

    pair = first_active(session)
    session.select_tile(pair.id, 'calc')
    before = session.time_left
    session.select_tile(pair.id, 'answer')
    assert session.time_left == before + 20
    bonuses = of_type(received, events.BonusGranted)
    assert len(bonuses) == 1
    assert bonuses[0].seconds == 20
    assert bonuses[0].text == '+20s ⏱️'
    assert session.scores.last_bonus_at == 1

    match_one(session)
    assert len(of_type(received, events.BonusGranted)) == 1

    session.scheduler.advance(1.5)
    assert len(of_type(received, events.BonusExpired)) == 1


def test_score_is_always_even(session, received):
    session.start()
    for _ in range(7):
        match_one(session)
    scores = [e.score for e in of_type(received, events.ScoreChanged)]
    assert scores == [0, 2, 4, 6, 8, 10, 12, 14]
    assert all(s >= 0 and s % 2 == 0 for s in scores)


def test_sixtieth_match_wins(session, received):
    session.start()
    for _ in range(59):
        match_one(session)
    assert session.state == RUNNING
    assert session.score == 118
    assert of_type(received, events.GameEnded) == []

    match_one(session)
    assert session.state == WON
    assert of_type(received, events.GameEnded) == [events.GameEnded(result='won', final_score=120)]

    frozen = session.time_left
    session.scheduler.advance(100)
    assert session.time_left == frozen
    assert len(of_type(received, events.GameEnded)) == 1
    assert session.select_tile(first_active(session).id, 'calc') is None


def test_countdown_runs_out(session, received):
    session.start()
    session.scheduler.advance(59)
    assert session.state == RUNNING
    assert session.time_left == 1
    assert received[-1] == events.TimerTick(time_left=1, urgency='low', progress=pytest.approx(1 / 60))

    session.scheduler.advance(1)
    assert session.state == LOST
    assert session.time_left == 0
    assert of_type(received, events.GameEnded) == [events.GameEnded(result='lost', final_score=0)]

    session.scheduler.advance(10)
    assert len(of_type(received, events.TimerTick)) == 61


def test_urgency_follows_time_left(session, received):
    session.start()
    session.scheduler.advance(40)
    assert received[-1].urgency == 'warning'
    session.scheduler.advance(10)
    assert received[-1].urgency == 'low'


def test_ending_clears_pending_selection(session, received):
    session.start()
    session.select_tile(first_active(session).id, 'calc')
    session.scheduler.advance(60)
    assert session.engine.idle
    tail = [type(e) for e in received[-2:]]
    assert tail == [events.SelectionCleared, events.GameEnded]


def test_restart_mid_game_resets_and_orphans_pending_work(session, received):
    session.start()
    old_ids = {p.id for p in session.pairs.pairs}
    pair = first_active(session)
    session.select_tile(pair.id, 'calc')
    session.select_tile(pair.id, 'answer')
    other = first_active(session)
    session.select_tile(other.id, 'calc')

    session.start()
    del received[:]
    assert session.score == 0
    assert session.engine.idle
    assert session.scores.last_bonus_at == 0
    assert all(p.status == 'active' for p in session.pairs.pairs)
    assert min(p.id for p in session.pairs.pairs) > max(old_ids)

    session.scheduler.advance(0.9)
    assert of_type(received, events.PairRemoved) == []
    assert len(session.pairs) == 8


def test_restart_after_loss(session, received):
    session.start()
    session.scheduler.advance(60)
    assert session.state == LOST
    session.start()
    assert session.state == RUNNING
    assert session.time_left == 60
    session.scheduler.advance(1)
    assert session.time_left == 59


def test_close_stops_everything(session, received):
    session.start()
    match_one(session)
    pair = first_active(session)
    session.select_tile(pair.id, 'calc')
    session.select_tile(pair.id, 'answer')
    session.close()
    del received[:]
    session.scheduler.advance(30)
    assert received == []


def test_snapshot_describes_board(session):
    session.start()
    snap = session.snapshot()
    assert snap['game_code'] == 'TEST'
    assert snap['status'] == 'running'
    assert len(snap['pairs']) == 8
    assert len(snap['slots']) == 16
    assert all(slot is not None for slot in snap['slots'])
    assert snap['selected'] is None
    assert snap['rules']['total_to_win'] == 120
