import pytest


@pytest.fixture
def ids(series, players):
    return {'series': series.id, 'season': series.season_id, 'players': [p.id for p in players]}


def _submit(client, ids, rankings, **extra):
    body = {'total_players': 8, 'game_time': '2024-03-07T19:00:00', 'rankings': rankings}
    body.update(extra)
    return client.post(f"/api/series/{ids['series']}/results", json=body)


def test_score_endpoint(client):
    response = client.post('/api/score', json={'total_players': 8, 'rankings': ['a', 'b', 'c']})
    assert response.status_code == 200
    assert response.get_json() == {'ok': True, 'points': {'a': 80, 'b': 72, 'c': 64}}


def test_score_endpoint_rejects_ties(client):
    response = client.post('/api/score', json={'total_players': 8, 'rankings': [['a', 1], ['b', 1]]})
    assert response.status_code == 400
    payload = response.get_json()
    assert payload['ok'] is False
    assert payload['code'] == 'VALIDATION_ERROR'
    assert payload['issues'][0]['code'] == 'TIED_RANK'


def test_non_json_body(client, ids):
    response = client.post(f"/api/series/{ids['series']}/results", data='rankings=1')
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Request body must be a JSON object.'


def test_submit_and_read_standings(client, ids):
    p = ids['players']
    response = _submit(client, ids, [p[0], p[1], p[2]], bounties=[p[0]])
    assert response.status_code == 201
    assert response.get_json()['ok'] is True

    standings = client.get(f"/api/series/{ids['series']}/standings").get_json()
    assert [row['player_id'] for row in standings['standings']] == [p[0], p[1], p[2]]
    assert standings['standings'][0]['total_points'] == 81


def test_standings_cache_is_invalidated_by_submission(client, ids):
    p = ids['players']
    _submit(client, ids, [p[0], p[1]])
    first = client.get(f"/api/series/{ids['series']}/standings").get_json()
    assert first['standings'][0]['total_points'] == 80

    _submit(client, ids, [p[0]], game_time='2024-03-14T19:00:00')
    second = client.get(f"/api/series/{ids['series']}/standings").get_json()
    assert second['standings'][0]['total_points'] == 160


def test_unknown_series_is_404(client, app):
    response = client.get('/api/series/nope/standings')
    assert response.status_code == 404
    assert response.get_json() == {
        'ok': False, 'code': 'NOT_FOUND', 'error': 'series nope not found',
        'kind': 'series', 'entity_id': 'nope',
    }


def test_submission_id_retry_returns_same_tournament(client, ids):
    p = ids['players']
    first = _submit(client, ids, [p[0]], submission_id='night-1').get_json()
    again = _submit(client, ids, [p[0]], submission_id='night-1').get_json()
    assert first['tournament_id'] == again['tournament_id']
    assert len(client.get('/api/tournaments').get_json()['tournaments']) == 1


def test_rebuild_endpoint(client, ids):
    p = ids['players']
    _submit(client, ids, [p[0], p[1]])
    response = client.post(f"/api/series/{ids['series']}/rebuild")
    assert response.status_code == 200
    assert response.get_json()['count'] == 2


def test_season_standings_and_profile(client, ids):
    p = ids['players']
    _submit(client, ids, [p[0], p[1]])

    seasons = client.get('/api/standings').get_json()['seasons']
    assert seasons[0]['series'][0]['standings'][0]['player_id'] == p[0]

    profile = client.get(f'/api/players/{p[0]}/profile').get_json()
    assert profile['totals']['total_points'] == 80
    assert profile['totals']['best_finish'] == 1


def test_tournament_listing_and_details(client, ids):
    p = ids['players']
    tournament_id = _submit(client, ids, [p[0], p[1]], consolation=[p[2]]).get_json()['tournament_id']

    listing = client.get(f"/api/tournaments?series_id={ids['series']}").get_json()['tournaments']
    assert listing[0]['id'] == tournament_id
    assert listing[0]['winner'] == 'P1'

    details = client.get(f'/api/tournaments/{tournament_id}').get_json()
    assert details['consolation_players'] == ['P3']
    assert len(details['results']) == 3


def test_qualification_endpoints(client, ids):
    p = ids['players']
    _submit(client, ids, [p[0], p[1], p[2], p[3]])

    qualified = client.get(f"/api/seasons/{ids['season']}/qualified").get_json()['players']
    assert [q['player_id'] for q in qualified] == [p[0], p[1], p[2]]

    filtered = client.get(f"/api/seasons/{ids['season']}/qualified?q=p2").get_json()['players']
    assert [q['name'] for q in filtered] == ['P2']

    status = client.get(f"/api/seasons/{ids['season']}/qualification-status").get_json()
    assert status['total_qualified'] == 3
    assert status['remaining_spots'] == 29


def test_finale_endpoints(client, ids):
    p = ids['players']
    _submit(client, ids, [p[0], p[1], p[2]])

    response = client.post(f"/api/seasons/{ids['season']}/finale", json={
        'event_name': 'Spring Finale',
        'event_date': '2024-06-01',
        'final_rankings': [p[1], p[0], p[2]],
    })
    assert response.status_code == 201

    events = client.get(f"/api/seasons/{ids['season']}/finales").get_json()['events']
    assert len(events) == 1
    assert [r['prize'] for r in events[0]['results']] == [1200, 800, 500]
    assert events[0]['results'][1]['starting_chips'] == 10000 + 15000 + 80 * 100


def test_finale_validation_error(client, ids):
    response = client.post(f"/api/seasons/{ids['season']}/finale", json={'final_rankings': []})
    assert response.status_code == 400
    codes = [issue['code'] for issue in response.get_json()['issues']]
    assert 'EVENT_NAME_REQUIRED' in codes


@pytest.mark.parametrize('extra, code', [
    ({'bounties': [{'id': 'x'}]}, 'INVALID_BOUNTY_PLAYER'),
    ({'consolation': [7]}, 'INVALID_CONSOLATION_PLAYER'),
    ({'bounties': 'x'}, 'INVALID_LIST'),
    ({'new_players': [{'id': 't1', 'name': 5}]}, 'NEW_PLAYER_NAME_INVALID'),
    ({'submission_id': 12}, 'INVALID_SUBMISSION_ID'),
])
def test_malformed_submission_is_400(client, ids, extra, code):
    response = _submit(client, ids, [ids['players'][0]], **extra)
    assert response.status_code == 400
    assert code in [issue['code'] for issue in response.get_json()['issues']]
    assert client.get('/api/tournaments').get_json()['tournaments'] == []


def test_submission_id_reused_in_other_series_is_400(client, ids, make_series):
    other = make_series('Turbo Series')
    _submit(client, ids, [ids['players'][0]], submission_id='night-1')

    response = client.post(f'/api/series/{other.id}/results', json={
        'total_players': 8, 'game_time': '2024-03-07T19:00:00',
        'rankings': [ids['players'][1]], 'submission_id': 'night-1',
    })
    assert response.status_code == 400
    assert response.get_json()['issues'][0]['code'] == 'SUBMISSION_ID_CONFLICT'


def test_finale_with_non_text_name_is_400(client, ids):
    response = client.post(f"/api/seasons/{ids['season']}/finale", json={
        'event_name': 7,
        'event_date': '2024-06-01',
        'final_rankings': [ids['players'][0]],
    })
    assert response.status_code == 400
    assert [issue['code'] for issue in response.get_json()['issues']] == ['EVENT_NAME_INVALID']


def test_finale_rankings_must_be_a_list(client, ids):
    response = client.post(f"/api/seasons/{ids['season']}/finale", json={
        'event_name': 'Spring Finale',
        'event_date': '2024-06-01',
        'final_rankings': ids['players'][0],
    })
    assert response.status_code == 400
    assert response.get_json()['issues'][0]['code'] == 'INVALID_LIST'


def test_score_rankings_must_be_a_list(client):
    response = client.post('/api/score', json={'total_players': 8, 'rankings': 5})
    assert response.status_code == 400
    assert response.get_json()['issues'][0]['field'] == 'rankings'
