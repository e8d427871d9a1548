from __future__ import annotations

import json
import types

import pytest

from blockstack_cli.client import NetworkClient
from blockstack_cli.errors import NetworkRequestError, UnconfirmedTransactionError


def _response(status_code: int, payload=None, text: str | None = None):
    def _json():
        if payload is None:
            raise ValueError("no json")
        return payload

    body = text if text is not None else json.dumps(payload)
    return types.SimpleNamespace(status_code=status_code, json=_json, text=body)


def _client_with_routes(monkeypatch, routes: dict) -> tuple[NetworkClient, list]:
    client = NetworkClient(api_url="http://core.local:6270/", timeout=0.1, retries=0)
    captured: list = []

    def fake_request(method, url, *, params=None, json=None, timeout=None):  # noqa: ANN001
        captured.append({"method": method, "url": url, "params": params, "json": json})
        route = routes[url]
        return route() if callable(route) else route

    monkeypatch.setattr(client._session, "request", fake_request)
    return client, captured


def test_get_name_info_uses_expected_url(monkeypatch) -> None:
    client, captured = _client_with_routes(
        monkeypatch,
        {"http://core.local:6270/v1/names/foo.id": _response(200, {"address": "1abc"})},
    )
    assert client.get_name_info("foo.id") == {"address": "1abc"}
    assert captured[0]["method"] == "GET"


def test_error_status_raises_request_error_with_detail(monkeypatch) -> None:
    client, _ = _client_with_routes(
        monkeypatch,
        {"http://core.local:6270/v1/names/nope.id": _response(404, {"error": "Name not found"})},
    )
    with pytest.raises(NetworkRequestError) as exc_info:
        client.get_name_info("nope.id")
    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Name not found"
    assert str(exc_info.value) == "Bad response status: 404 Name not found"


def test_error_status_with_plain_text_body(monkeypatch) -> None:
    client, _ = _client_with_routes(
        monkeypatch,
        {"http://core.local:6270/v1/names/x.id": _response(502, text="bad gateway")},
    )
    with pytest.raises(NetworkRequestError) as exc_info:
        client.get_name_info("x.id")
    assert str(exc_info.value) == "Bad response status: 502"
    assert exc_info.value.body == "bad gateway"


def test_name_price_v2(monkeypatch) -> None:
    client, _ = _client_with_routes(
        monkeypatch,
        {
            "http://core.local:6270/v2/prices/names/foo.id": _response(
                200, {"name_price": {"units": "STACKS", "amount": 1000}}
            )
        },
    )
    assert client.get_name_price("foo.id") == {"units": "STACKS", "amount": "1000"}


def test_name_price_falls_back_to_v1(monkeypatch) -> None:
    client, captured = _client_with_routes(
        monkeypatch,
        {
            "http://core.local:6270/v2/prices/names/foo.id": _response(404, {"error": "nope"}),
            "http://core.local:6270/v1/prices/names/foo.id": _response(
                200, {"name_price": {"satoshis": 25000}}
            ),
        },
    )
    assert client.get_name_price("foo.id") == {"units": "BTC", "amount": "25000"}
    assert len(captured) == 2


def test_namespace_price_falls_back_to_v1(monkeypatch) -> None:
    client, _ = _client_with_routes(
        monkeypatch,
        {
            "http://core.local:6270/v2/prices/namespaces/id": _response(404, {}),
            "http://core.local:6270/v1/prices/namespaces/id": _response(200, {"satoshis": 40}),
        },
    )
    assert client.get_namespace_price("id") == {"units": "BTC", "amount": "40"}


def test_name_history_passes_page(monkeypatch) -> None:
    client, captured = _client_with_routes(
        monkeypatch,
        {"http://core.local:6270/v1/names/foo.id/history": _response(200, {"100": []})},
    )
    assert client.get_name_history("foo.id", 3) == {"100": []}
    assert captured[0]["params"] == {"page": 3}


def test_zonefile_missing_returns_none(monkeypatch) -> None:
    client, _ = _client_with_routes(
        monkeypatch,
        {"http://core.local:6270/v1/zonefiles/" + "a" * 40: _response(404, text="missing")},
    )
    assert client.get_zonefile("a" * 40) is None


def test_broadcast_zonefile_posts_payload(monkeypatch) -> None:
    client, captured = _client_with_routes(
        monkeypatch,
        {"http://core.local:6270/v1/zonefile/": _response(200, {"status": True})},
    )
    assert client.broadcast_zonefile("$ORIGIN foo.id") == {"status": True}
    assert captured[0]["method"] == "POST"
    assert captured[0]["json"] == {"zonefile": "$ORIGIN foo.id"}


def test_account_balance_404_is_zero(monkeypatch) -> None:
    client, _ = _client_with_routes(
        monkeypatch,
        {"http://core.local:6270/v1/accounts/1abc/STACKS/balance": _response(404, {})},
    )
    assert client.get_account_balance("1abc", "STACKS") == "0"


def test_unconfirmed_transaction(monkeypatch) -> None:
    client, _ = _client_with_routes(
        monkeypatch,
        {"https://blockchain.info/rawtx/" + "f" * 64: _response(200, {"hash": "f" * 64})},
    )
    with pytest.raises(UnconfirmedTransactionError):
        client.get_transaction_info("f" * 64)


def test_utxos_with_no_free_outputs_is_empty(monkeypatch) -> None:
    client, _ = _client_with_routes(
        monkeypatch,
        {"https://blockchain.info/unspent": _response(500, text="No free outputs to spend")},
    )
    assert client.get_utxos("1abc") == []


def test_block_height(monkeypatch) -> None:
    client, _ = _client_with_routes(
        monkeypatch,
        {"https://blockchain.info/latestblock": _response(200, {"height": 550000})},
    )
    assert client.get_block_height() == 550000
