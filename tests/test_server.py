import io
import socket

import pytest

from superwav.server import Server, format_data, main, write_time_delay
from superwav.utils import current_timestamp


def recv_exactly(conn, size):
    data = b""
    while len(data) < size:
        chunk = conn.recv(size - len(data))
        if not chunk:
            break
        data += chunk
    return data


@pytest.fixture
def server():
    srv = Server(0)
    srv.start_pause = 0
    srv.poll_interval = 0.05
    yield srv
    srv.close()


@pytest.fixture
def connect(server):
    opened = []

    def _connect():
        conn = socket.create_connection(("127.0.0.1", server.port), timeout=5)
        opened.append(conn)
        return conn

    yield _connect
    for conn in opened:
        conn.close()


def test_format_data_matches_wire_format():
    assert format_data(1435142177654, 3) == "StartTime: 1435142177654,IDClient: 3"


def test_write_time_delay_appends_lines(tmp_path):
    path = tmp_path / "delay.txt"
    before = current_timestamp()
    write_time_delay(42, path)
    write_time_delay(-7, path)
    after = current_timestamp()
    lines = path.read_text().splitlines()
    assert len(lines) == 2
    first = lines[0].split("\t")
    assert first[0] == ""
    assert before <= int(first[1]) <= after
    assert first[2] == "42"
    assert lines[1].split("\t")[2] == "-7"


def test_accept_numbers_clients_from_one(server, connect):
    first = connect()
    assert server.accept_pending(2.0) == 1
    assert recv_exactly(first, 1) == b"1"
    second = connect()
    assert server.accept_pending(2.0) == 2
    assert recv_exactly(second, 1) == b"2"
    assert [number for number, _ in server.clients] == [1, 2]


def test_accept_without_pending_returns_none(server):
    assert server.accept_pending(0.01) is None
    assert server.clients == []


def test_accept_refuses_beyond_max_clients(connect):
    srv = Server(0, max_clients=1)
    try:
        first = socket.create_connection(("127.0.0.1", srv.port), timeout=5)
        second = socket.create_connection(("127.0.0.1", srv.port), timeout=5)
        assert srv.accept_pending(2.0) == 1
        assert srv.accept_pending(2.0) is None
        assert len(srv.clients) == 1
        assert second.recv(16) == b""
        first.close()
        second.close()
    finally:
        srv.close()


def test_notify_clients_sends_to_all(server, connect, capsys):
    clients = [connect(), connect()]
    for _ in clients:
        server.accept_pending(2.0)
    for conn in clients:
        recv_exactly(conn, 1)
    server.notify_clients(500, 9)
    expected = format_data(500, 9).encode()
    for conn in clients:
        assert recv_exactly(conn, len(expected)) == expected
    assert "Time to start: 500" in capsys.readouterr().out


def test_handle_key_p_reads_client_number(server, connect):
    conn = connect()
    server.accept_pending(2.0)
    recv_exactly(conn, 1)
    assert server.handle_key("p", io.StringIO("7\n")) is True
    expected = format_data(0, 7).encode()
    assert recv_exactly(conn, len(expected)) == expected


def test_handle_key_s_starts_once(server, connect, capsys):
    conn = connect()
    server.accept_pending(2.0)
    recv_exactly(conn, 1)
    before = current_timestamp()
    assert server.handle_key("s") is True
    assert server.playing is True
    conn.settimeout(2)
    message = conn.recv(256).decode()
    start_part, id_part = message.split(",")
    assert int(start_part.split(":")[1]) > before
    assert id_part == "IDClient: 1"
    server.handle_key("s")
    assert "Already playing!" in capsys.readouterr().out


def test_handle_key_a_when_playing_does_not_launch(server, capsys):
    server.playing = True
    assert server.handle_key("a") is True
    assert "Already playing!" in capsys.readouterr().out


def test_handle_key_a_reports_missing_program(server, tmp_path, capsys):
    server.client_program = str(tmp_path / "missing-client")
    assert server.handle_key("a") is True
    assert "Error fork client" in capsys.readouterr().err


def test_handle_key_unknown_is_reported(server, capsys):
    assert server.handle_key("x") is True
    assert "Has presionado x" in capsys.readouterr().out


def test_handle_key_e_stops_and_notifies(server, connect):
    conn = connect()
    server.accept_pending(2.0)
    recv_exactly(conn, 1)
    assert server.handle_key("e") is False
    expected = format_data(0, -1).encode()
    assert recv_exactly(conn, len(expected)) == expected


def test_serve_accepts_then_exits_on_e(server, connect):
    conn = connect()
    server.serve(io.StringIO("e"))
    expected = b"1" + format_data(0, -1).encode()
    assert recv_exactly(conn, len(expected)) == expected


def test_close_drops_clients(server, connect):
    connect()
    server.accept_pending(2.0)
    server.close()
    assert server.clients == []
    with pytest.raises(OSError):
        server.accept_pending(0.01)


def test_main_without_arguments_fails(capsys):
    assert main([]) == 1
    assert "Wrong use of the program!" in capsys.readouterr().out


def test_main_help(capsys):
    assert main(["-h"]) == 0
    assert "SuperWavAppServer <PortNumber>" in capsys.readouterr().out


def test_negative_max_clients_rejected():
    with pytest.raises(ValueError):
        Server(0, max_clients=-1)