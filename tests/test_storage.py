import json
import os

import pytest

from src.core.storage import CatalogError, TrackerError, load_catalog, load_previous_payload, write_payload


def write_json(path, obj):
    path.write_text(json.dumps(obj), encoding='utf-8')
    return str(path)


def test_load_catalog_keeps_order(tmp_path):
    path = write_json(tmp_path / 'games.json', [
        {'id': 'b', 'name': 'B', 'appid': 2, 'enabled': True},
        {'id': 'a', 'name': 'A', 'appid': None, 'enabled': False},
    ])

    games = load_catalog(path)

    assert [game['id'] for game in games] == ['b', 'a']
    assert games[1]['appid'] is None


@pytest.mark.parametrize('catalog', [
    {'id': 'a'},
    ['not an object'],
    [{'name': 'A', 'appid': 1, 'enabled': True}],
    [{'id': '', 'name': 'A', 'appid': 1, 'enabled': True}],
    [{'id': 'a', 'appid': 1, 'enabled': True}],
    [{'id': 'a', 'name': 'A', 'appid': '123', 'enabled': True}],
    [{'id': 'a', 'name': 'A', 'appid': True, 'enabled': True}],
    [{'id': 'a', 'name': 'A', 'appid': 1, 'enabled': 'yes'}],
    [{'id': 'a', 'name': 'A', 'appid': 1, 'enabled': True}, {'id': 'a', 'name': 'A2', 'appid': 2, 'enabled': True}],
])
def test_load_catalog_rejects_malformed_documents(tmp_path, catalog):
    path = write_json(tmp_path / 'games.json', catalog)

    with pytest.raises(CatalogError):
        load_catalog(path)


def test_load_catalog_rejects_missing_and_invalid_files(tmp_path):
    broken = tmp_path / 'broken.json'
    broken.write_text('{not json', encoding='utf-8')

    with pytest.raises(CatalogError):
        load_catalog(str(tmp_path / 'missing.json'))
    with pytest.raises(TrackerError):
        load_catalog(str(broken))


def test_previous_payload_missing_or_broken_is_none(tmp_path):
    broken = tmp_path / 'broken.json'
    broken.write_text('{"updatedAt": ', encoding='utf-8')
    wrong_shape = write_json(tmp_path / 'wrong.json', {'updatedAt': 'x', 'items': 'nope'})

    assert load_previous_payload(str(tmp_path / 'missing.json')) is None
    assert load_previous_payload(str(broken)) is None
    assert load_previous_payload(wrong_shape) is None
    assert load_previous_payload(write_json(tmp_path / 'list.json', [])) is None


def test_previous_payload_is_loaded(tmp_path):
    payload = {'updatedAt': '2026-02-12T00:00:00.000Z', 'items': [{'id': 'a', 'playerCount': 1}]}

    assert load_previous_payload(write_json(tmp_path / 'players.json', payload)) == payload


def test_write_payload_creates_directory_and_replaces_atomically(tmp_path):
    target = tmp_path / 'nested' / 'data' / 'players.json'
    first = {'updatedAt': '2026-02-12T00:00:00.000Z', 'items': [{'id': 'a', 'name': 'ストリートファイター6'}]}
    second = {'updatedAt': '2026-02-12T00:01:00.000Z', 'items': []}

    write_payload(str(target), first)
    raw = target.read_text(encoding='utf-8')
    assert raw.endswith('\n')
    assert 'ストリートファイター6' in raw
    assert json.loads(raw) == first

    write_payload(str(target), second)
    assert json.loads(target.read_text(encoding='utf-8')) == second
    assert os.listdir(target.parent) == ['players.json']
