import socket
from types import SimpleNamespace
from unittest import mock

import pytest

from spherewars.utils import (
    create_udp_server_socket,
    get_local_ip,
    log_error,
    log_info,
    log_warning,
    print_info,
)


def test_log_info_wraps_in_green(capsys):
    log_info("hello")
    assert capsys.readouterr().out == "\x1b[32mhello\x1b[0m\n"


def test_log_warning_wraps_in_yellow(capsys):
    log_warning("careful")
    assert capsys.readouterr().out == "\x1b[33mcareful\x1b[0m\n"


def test_log_error_wraps_in_red(capsys):
    log_error("broken")
    assert capsys.readouterr().out == "\x1b[31mbroken\x1b[0m\n"


@pytest.mark.parametrize(
    "difficulty, description",
    [
        ("easy", "Easy (More connections, fewer dead ends)"),
        ("medium", "Medium (Balanced maze complexity)"),
        ("hard", "Hard (Minimal connections, more dead ends)"),
        ("weird", "Unknown"),
    ],
)
def test_print_info_describes_difficulty(capsys, difficulty, description):
    print_info(SimpleNamespace(host="10.1.2.3", port=4242, difficulty=difficulty))
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "🎮 Sphere Wars UDP Server"
    assert "Host: 10.1.2.3" in lines
    assert "Port: 4242" in lines
    assert f"Difficulty: {difficulty} - {description}" in lines
    assert "Maze Size: 12x12 with randomized spawn points" in lines


def test_create_udp_server_socket_binds(capsys):
    sock = create_udp_server_socket("127.0.0.1", 0)
    try:
        assert sock.type == socket.SOCK_DGRAM
        assert sock.getsockname()[0] == "127.0.0.1"
    finally:
        sock.close()
    assert "Successfully bound to 127.0.0.1:0" in capsys.readouterr().out


def test_create_udp_server_socket_port_in_use_exits(capsys):
    holder = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    holder.bind(("127.0.0.1", 0))
    port = holder.getsockname()[1]
    try:
        with pytest.raises(SystemExit) as info:
            create_udp_server_socket("127.0.0.1", port)
    finally:
        holder.close()
    assert info.value.code == 1
    err = capsys.readouterr().err
    assert f"Failed to bind to 127.0.0.1:{port}" in err
    assert f"Port {port} is already in use" in err


def test_get_local_ip_uses_route_to_public_address():
    with mock.patch("socket.socket") as socket_cls:
        inner = socket_cls.return_value.__enter__.return_value
        inner.getsockname.return_value = ("192.0.2.5", 40000)
        result = get_local_ip()
    assert result == "192.0.2.5"
    inner.connect.assert_called_once_with(("8.8.8.8", 80))