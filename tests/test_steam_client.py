import asyncio

import aiohttp
from aiohttp import web
from aiohttp.test_utils import TestServer

from src.models.game import FetchOk, FetchFailed
from src.sources.steam import SteamClient

SLOW_APPID = 4


def fake_steam_app() -> web.Application:
    async def players(request: web.Request) -> web.Response:
        appid = int(request.query['appid'])
        if appid == 1:
            return web.json_response({'response': {'player_count': 30905, 'result': 1}})
        if appid == 2:
            return web.Response(status=500, text='error')
        if appid == 3:
            return web.json_response({'response': {'result': 42}})
        if appid == SLOW_APPID:
            await asyncio.sleep(1)
            return web.json_response({'response': {'player_count': 1, 'result': 1}})
        return web.Response(text='<html>not json</html>', content_type='text/html')

    async def appdetails(request: web.Request) -> web.Response:
        appid = request.query['appids']
        assert request.query['cc'] == 'jp'
        if appid == '10':
            return web.json_response({appid: {'success': True, 'data': {'price_overview': {'discount_percent': 35}}}})
        if appid == '11':
            return web.json_response({appid: {'success': True, 'data': []}})
        if appid == '12':
            return web.json_response({appid: {'success': False}})
        if appid == '13':
            return web.json_response({appid: {'success': True, 'data': {'price_overview': {'discount_percent': 0}}}})
        return web.Response(status=503, text='busy')

    app = web.Application()
    app.router.add_get('/players', players)
    app.router.add_get('/appdetails', appdetails)
    return app


def call(method_name, appid, timeout=2.0):
    async def _run():
        async with TestServer(fake_steam_app()) as server:
            async with aiohttp.ClientSession() as session:
                client = SteamClient(
                    session,
                    timeout=timeout,
                    country='jp',
                    players_url=str(server.make_url('/players')) + '?appid={app_id}',
                    appdetails_url=str(server.make_url('/appdetails')) + '?appids={app_id}&cc={country}',
                )
                return await getattr(client, method_name)(appid)
    return asyncio.run(_run())


def test_current_players_success():
    assert call('get_current_players', 1) == FetchOk(30905)


def test_current_players_http_error():
    assert call('get_current_players', 2) == FetchFailed('Steam API error (500)')


def test_current_players_missing_field():
    assert call('get_current_players', 3) == FetchFailed('Steam API response missing player_count')


def test_current_players_invalid_json():
    result = call('get_current_players', 5)

    assert isinstance(result, FetchFailed)
    assert result.reason.startswith('invalid JSON')


def test_current_players_timeout_is_a_failure():
    result = call('get_current_players', SLOW_APPID, timeout=0.2)

    assert result == FetchFailed('timeout after 0.2s')


def test_sale_info_with_discount():
    assert call('get_sale_info', 10) == FetchOk({'isOnSale': True, 'discountPercent': 35})


def test_sale_info_without_price_overview_means_no_sale():
    assert call('get_sale_info', 11) == FetchOk({'isOnSale': False, 'discountPercent': 0})
    assert call('get_sale_info', 13) == FetchOk({'isOnSale': False, 'discountPercent': 0})


def test_sale_info_unsuccessful_response():
    assert call('get_sale_info', 12) == FetchFailed('Store API response unsuccessful')


def test_sale_info_http_error():
    assert call('get_sale_info', 14) == FetchFailed('Store API error (503)')


def test_connection_error_is_a_failure():
    async def _run():
        async with aiohttp.ClientSession() as session:
            # port 9 (discard) on localhost is not expected to accept connections
            client = SteamClient(session, timeout=2.0, players_url='http://127.0.0.1:9/players?appid={app_id}')
            return await client.get_current_players(1)

    assert isinstance(asyncio.run(_run()), FetchFailed)
