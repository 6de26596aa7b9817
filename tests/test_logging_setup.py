import json
import logging

from services.logging_setup import JsonFormatter


def _record(**extra):
    record = logging.LogRecord('services.scoreboard', logging.INFO, __file__, 1,
                               'Recorded tournament %s', ('t1',), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_carries_context_fields():
    payload = json.loads(JsonFormatter().format(_record(series_id='s1', tournament_id='t1')))

    assert payload['message'] == 'Recorded tournament t1'
    assert payload['level'] == 'INFO'
    assert payload['logger'] == 'services.scoreboard'
    assert payload['series_id'] == 's1'
    assert payload['tournament_id'] == 't1'
    assert 'args' not in payload


def test_json_formatter_without_context():
    payload = json.loads(JsonFormatter().format(_record()))
    assert set(payload) == {'timestamp', 'level', 'logger', 'message'}
