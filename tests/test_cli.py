from unittest import mock

import pytest

from spherewars.cli import ServerArgs, parse_args


def test_defaults():
    args = parse_args([])
    assert args == ServerArgs(host="127.0.0.1", port=8080, difficulty="medium", local=False)


def test_all_options():
    args = parse_args(["--host", "0.0.0.0", "-p", "9000", "-d", "hard", "-l"])
    assert args.host == "0.0.0.0"
    assert args.port == 9000
    assert args.difficulty == "hard"
    assert args.local is True


def test_long_options():
    args = parse_args(["--port", "1234", "--difficulty", "easy", "--local"])
    assert (args.port, args.difficulty, args.local) == (1234, "easy", True)


@pytest.mark.parametrize("port", ["70000", "-1", "abc", ""])
def test_invalid_port_rejected(port):
    with pytest.raises(SystemExit):
        parse_args(["--port", port])


def test_validate_rejects_unknown_difficulty():
    args = parse_args(["-d", "insane"])
    with pytest.raises(ValueError) as info:
        args.validate()
    assert str(info.value) == (
        "Invalid difficulty 'insane'. Valid options are: easy, medium, hard"
    )


def test_resolve_host_keeps_host_when_not_local():
    args = ServerArgs(host="10.0.0.7")
    assert args.resolve_host() == "10.0.0.7"
    assert args.host == "10.0.0.7"


def test_resolve_host_uses_local_ip():
    args = ServerArgs(host="10.0.0.7", local=True)
    with mock.patch("socket.socket") as socket_cls:
        inner = socket_cls.return_value.__enter__.return_value
        inner.getsockname.return_value = ("192.0.2.9", 5555)
        result = args.resolve_host()
    assert result == "192.0.2.9"
    assert args.host == "192.0.2.9"