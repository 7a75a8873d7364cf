from unittest import mock

import pytest
import requests
from verystable.rpc import JSONRPCError

from Publisher import ExplorerAPI, RpcPublisher
from errors import PublishError


def fake_response(ok: bool, text: str, status_code: int = 200):
    resp = mock.Mock()
    resp.ok = ok
    resp.text = text
    resp.status_code = status_code
    return resp


def test_explorer_publish():
    with mock.patch("Publisher.requests.post") as post:
        post.return_value = fake_response(True, "ab" * 32 + "\n")
        got = ExplorerAPI("https://blockstream.info/api/").publish("0200")

    post.assert_called_once_with(
        "https://blockstream.info/api/tx", data="0200", timeout=30
    )
    assert got == "ab" * 32


def test_explorer_publish_rejected():
    with mock.patch("Publisher.requests.post") as post:
        post.return_value = fake_response(False, "non-BIP68-final", 400)
        with pytest.raises(PublishError, match="non-BIP68-final"):
            ExplorerAPI("https://blockstream.info/api").publish("0200")


def test_explorer_publish_connection_error():
    with mock.patch("Publisher.requests.post") as post:
        post.side_effect = requests.ConnectionError("no route to host")
        with pytest.raises(PublishError):
            ExplorerAPI("http://localhost:1").publish("0200")


def test_rpc_publish():
    rpc = mock.Mock()
    rpc.sendrawtransaction.return_value = "cd" * 32

    assert RpcPublisher(rpc).publish("0200") == "cd" * 32
    rpc.sendrawtransaction.assert_called_once_with("0200")


def test_rpc_publish_rejected():
    rpc = mock.Mock()
    rpc.sendrawtransaction.side_effect = JSONRPCError(
        {"code": -26, "message": "non-BIP68-final"}
    )
    with pytest.raises(PublishError):
        RpcPublisher(rpc).publish("0200")
