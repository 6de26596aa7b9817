from datetime import datetime

import pytest

from models import Tournament, TournamentPlayer
from services.errors import EntityNotFound, ValidationError
from services.qualification import (calculate_chip_count, finale_prize, get_previous_season_events,
                                    get_qualification_status, get_qualified_players,
                                    record_season_finale)
from services.scoreboard import record_tournament_results


class TestChipCount:
    def test_formula(self):
        assert calculate_chip_count('Winner', 0) == 25000
        assert calculate_chip_count('TopThree', 10) == 16000
        assert calculate_chip_count('Winner', 172) == 10000 + 15000 + 17200
        assert calculate_chip_count(None, 3) == 10300

    def test_prize_table(self):
        assert [finale_prize(p) for p in range(1, 7)] == [1200, 800, 500, 300, 200, 0]


class TestQualifiedPlayers:
    def test_winner_dominates_top_three(self, series, players):
        p1, p2, p3 = players[:3]
        record_tournament_results(series.id, 8, datetime(2024, 3, 7, 19), [p1.id, p2.id, p3.id])
        record_tournament_results(series.id, 8, datetime(2024, 3, 14, 19), [p2.id, p1.id, p3.id])

        qualified = get_qualified_players(series.season_id)
        by_player = {q['player_id']: q for q in qualified}

        assert len(qualified) == 3
        # P1 and P2 both hold a Winner and a TopThree record: 152 points each
        assert by_player[p1.id]['qualification_type'] == 'Winner'
        assert by_player[p1.id]['total_chips'] == 10000 + 15000 + 152 * 100
        assert by_player[p2.id]['qualification_type'] == 'Winner'
        assert by_player[p3.id]['qualification_type'] == 'TopThree'
        assert by_player[p3.id]['total_chips'] == 10000 + 5000 + 128 * 100
        assert by_player[p3.id]['tournament_count'] == 2

        chips = [q['total_chips'] for q in qualified]
        assert chips == sorted(chips, reverse=True)

    def test_points_summed_across_season_series(self, series, make_series, players):
        p1 = players[0]
        turbo = make_series('Turbo Series')
        record_tournament_results(series.id, 8, datetime(2024, 3, 7, 19), [p1.id])
        record_tournament_results(turbo.id, 4, datetime(2024, 3, 8, 19), [players[1].id, players[2].id, players[3].id, p1.id])

        entry = next(q for q in get_qualified_players(series.season_id) if q['player_id'] == p1.id)
        assert entry['total_chips'] == 10000 + 15000 + (80 + 28) * 100
        assert entry['tournament_count'] == 2

    def test_name_filter(self, series, make_player):
        anna = make_player('Anna Banana')
        hank = make_player('Hank')
        record_tournament_results(series.id, 5, datetime(2024, 3, 7, 19), [hank.id, anna.id])

        assert [q['name'] for q in get_qualified_players(series.season_id, 'BANAN')] == ['Anna Banana']
        assert get_qualified_players(series.season_id, 'zzz') == []
        assert len(get_qualified_players(series.season_id, '')) == 2

    def test_empty_season(self, season):
        assert get_qualified_players(season.id) == []

    def test_missing_season(self, app):
        with pytest.raises(EntityNotFound):
            get_qualified_players('nope')


class TestQualificationStatus:
    def test_empty(self, season):
        status = get_qualification_status(season.id)
        assert status == {
            'total_qualified': 0,
            'max_players': 32,
            'tournament_winners': 0,
            'top_qualifiers': 0,
            'remaining_spots': 32,
        }

    def test_counts(self, series, players):
        p1, p2, p3, p4 = players[:4]
        record_tournament_results(series.id, 8, datetime(2024, 3, 7, 19), [p1.id, p2.id, p3.id])
        record_tournament_results(series.id, 8, datetime(2024, 3, 14, 19), [p1.id, p4.id, p2.id])

        status = get_qualification_status(series.season_id)
        assert status['total_qualified'] == 4
        assert status['tournament_winners'] == 2
        assert status['top_qualifiers'] == 4
        assert status['remaining_spots'] == 28


class TestSeasonFinale:
    def test_records_finale(self, series, season, players):
        p1, p2, p3 = players[:3]
        outsider = players[7]
        record_tournament_results(series.id, 8, datetime(2024, 3, 7, 19), [p1.id, p2.id, p3.id])

        finale = record_season_finale(
            season.id, 'Spring Finale', '2024-06-01T18:00:00',
            [(p2.id, 1), (outsider.id, 2), (p1.id, 3), (p3.id, 6)],
        )

        assert finale.series_id is None
        assert finale.event_type == 'season_event'
        assert finale.is_season_event
        assert finale.total_players == 4

        results = {r.player_id: r for r in TournamentPlayer.query.filter_by(tournament_id=finale.id)}
        assert {r.points for r in results.values()} == {0}
        assert results[p2.id].payout == 1200
        assert results[outsider.id].payout == 800
        assert results[p3.id].payout == 0
        assert results[p1.id].starting_chips == 10000 + 15000 + 80 * 100
        assert results[outsider.id].starting_chips is None

    def test_history(self, season, players):
        record_season_finale(season.id, 'Spring Finale', '2024-06-01', [players[0].id, players[1].id])

        events = get_previous_season_events(season.id)
        assert len(events) == 1
        assert events[0]['name'] == 'Spring Finale'
        assert events[0]['player_count'] == 2
        assert events[0]['results'][0] == {
            'position': 1,
            'player_id': players[0].id,
            'player_name': 'P1',
            'starting_chips': None,
            'prize': 1200,
        }

    @pytest.mark.parametrize('name, date, code', [
        ('', '2024-06-01', 'EVENT_NAME_REQUIRED'),
        ('Finale', None, 'EVENT_DATE_REQUIRED'),
    ])
    def test_requires_name_and_date(self, season, players, name, date, code):
        with pytest.raises(ValidationError) as excinfo:
            record_season_finale(season.id, name, date, [players[0].id])
        assert code in [issue.code for issue in excinfo.value.issues]

    def test_rejects_empty_oversized_or_tied(self, season, players):
        with pytest.raises(ValidationError):
            record_season_finale(season.id, 'Finale', '2024-06-01', [])
        with pytest.raises(ValidationError) as excinfo:
            record_season_finale(season.id, 'Finale', '2024-06-01', [f'p{i}' for i in range(33)])
        assert 'TOO_MANY_PLAYERS' in [issue.code for issue in excinfo.value.issues]
        with pytest.raises(ValidationError):
            record_season_finale(season.id, 'Finale', '2024-06-01', [(players[0].id, 1), (players[1].id, 1)])
        assert Tournament.query.count() == 0

    def test_unknown_player(self, season):
        with pytest.raises(EntityNotFound):
            record_season_finale(season.id, 'Finale', '2024-06-01', ['ghost'])
        assert Tournament.query.count() == 0
