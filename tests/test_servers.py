import io
import socket
import threading

import pytest

from echokit.servers import (
    ServerMode,
    echo_reply,
    greeting_reply,
    handle_once,
    handle_stream,
    hello_reply,
    main,
    open_listener,
    serve,
)


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    a.settimeout(5)
    b.settimeout(5)
    yield a, b
    a.close()
    b.close()


def _read_all(sock):
    chunks = []
    while data := sock.recv(4096):
        chunks.append(data)
    return b"".join(chunks)


class _BrokenConn:
    def __init__(self):
        self.sent = []

    def recv(self, size):
        raise ConnectionResetError("reset by peer")

    def sendall(self, data):
        self.sent.append(data)


def test_echo_reply_returns_input():
    assert echo_reply(b"some bytes\n") == b"some bytes\n"


def test_hello_reply_cuts_at_nul_and_appends_note():
    assert hello_reply(b"hi\0\0\0") == b"hi...Request is completed by the server\n"


def test_greeting_reply_ignores_input():
    assert greeting_reply(b"anything") == b"Hello, Client!"
    assert greeting_reply(b"") == greeting_reply(b"other")


def test_mode_reply_matches_functions():
    assert ServerMode.ECHO.reply is echo_reply
    assert ServerMode.HELLO.reply is hello_reply
    assert ServerMode("greeting").reply is greeting_reply


def test_handle_stream_echoes(pair):
    a, b = pair
    b.sendall(b"ping")
    b.shutdown(socket.SHUT_WR)
    out = io.StringIO()
    assert handle_stream(a, echo_reply, out) == 1
    a.close()
    assert _read_all(b) == b"ping"
    assert out.getvalue() == "String received from and resent to the client:ping\n"


def test_handle_stream_hello(pair):
    a, b = pair
    b.sendall(b"hello, client request" + b"\0" * 10)
    b.shutdown(socket.SHUT_WR)
    out = io.StringIO()
    assert handle_stream(a, hello_reply, out) == 1
    a.close()
    assert _read_all(b) == b"hello, client request...Request is completed by the server\n"
    assert out.getvalue() == "Client sent: hello, client request\n"


def test_handle_once_greets(pair):
    a, b = pair
    b.sendall(b"hi")
    out = io.StringIO()
    assert handle_once(a, greeting_reply, out) is True
    assert b.recv(1024) == b"Hello, Client!"
    assert out.getvalue() == (
        "Received: hi\nSent: Hello, Client!\nwaiting from client request ...\n"
    )


def test_handle_once_recv_failure():
    conn = _BrokenConn()
    out = io.StringIO()
    assert handle_once(conn, greeting_reply, out) is False
    assert conn.sent == []
    assert out.getvalue() == ""


def test_serve_echo_round_trip():
    out = io.StringIO()
    result = {}
    with open_listener("127.0.0.1", 0, 8) as listener:
        port = listener.getsockname()[1]
        worker = threading.Thread(
            target=lambda: result.update(n=serve(listener, ServerMode.ECHO, out, 1))
        )
        worker.start()
        with socket.create_connection(("127.0.0.1", port), timeout=5) as client:
            client.sendall(b"abc")
            assert client.recv(4096) == b"abc"
        worker.join(5)
    assert result["n"] == 1
    assert out.getvalue().startswith(
        "Server running...waiting for connections.\nReceived request...\n"
    )


def test_serve_greeting_handles_limit():
    out = io.StringIO()
    result = {}
    with open_listener("127.0.0.1", 0, 10) as listener:
        port = listener.getsockname()[1]
        worker = threading.Thread(
            target=lambda: result.update(n=serve(listener, ServerMode.GREETING, out, 2))
        )
        worker.start()
        replies = []
        for text in (b"one", b"two"):
            with socket.create_connection(("127.0.0.1", port), timeout=5) as client:
                client.sendall(text)
                replies.append(_read_all(client))
        worker.join(5)
    assert result["n"] == 2
    assert replies == [b"Hello, Client!", b"Hello, Client!"]
    log = out.getvalue()
    assert log.startswith(f"Server listening on port {port}...\n")
    assert log.count("Connected to client...\n") == 2


def test_serve_hello_banner_names_port():
    out = io.StringIO()
    with open_listener("127.0.0.1", 0, 8) as listener:
        port = listener.getsockname()[1]
        worker = threading.Thread(target=serve, args=(listener, ServerMode.HELLO, out, 1))
        worker.start()
        with socket.create_connection(("127.0.0.1", port), timeout=5) as client:
            client.sendall(b"x")
            reply = client.recv(4096)
        worker.join(5)
    assert reply == b"x...Request is completed by the server\n"
    assert out.getvalue().startswith(
        f"Server running...waiting for connections on port {port}.\n"
    )


def test_main_reports_busy_port():
    occupier = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        occupier.bind(("127.0.0.1", 0))
        occupier.listen(1)
        port = occupier.getsockname()[1]
        assert main(["--host", "127.0.0.1", "--port", str(port)]) == 1
    finally:
        occupier.close()