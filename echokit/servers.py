"""TCP echo servers: a plain echo, an annotated echo and a one-shot greeting."""

from __future__ import annotations

import argparse
import enum
import socket
import sys
from typing import Callable, Optional, TextIO

MAXLINE = 4096
GREETING_BUFFER = 1024
HELLO_SUFFIX = b"...Request is completed by the server\n"
GREETING_TEXT = "Hello, Client!"

Reply = Callable[[bytes], bytes]


def _text(data: bytes) -> str:
    """Decode the part of a received buffer that precedes the first NUL byte."""
    return data.split(b"\0", 1)[0].decode("utf-8", "replace")


def echo_reply(data: bytes) -> bytes:
    """Return an immutable copy of the received bytes."""
    return bytes(memoryview(data))


def hello_reply(data: bytes) -> bytes:
    """Return the received text (up to the first NUL) with a completion note appended."""
    return bytes(data).split(b"\0", 1)[0] + HELLO_SUFFIX


def greeting_reply(data: bytes) -> bytes:
    """Return the fixed greeting, whatever bytes were received."""
    memoryview(data)  # rejects anything that is not bytes-like
    return GREETING_TEXT.encode("ascii")


_LOG_FORMATS = {
    echo_reply: "String received from and resent to the client:{}\n",
    hello_reply: "Client sent: {}\n",
}


class ServerMode(enum.Enum):
    """The behaviours a server can run with."""

    ECHO = "echo"
    HELLO = "hello"
    GREETING = "greeting"

    @property
    def default_port(self) -> int:
        return 8080 if self is ServerMode.GREETING else 3000

    @property
    def backlog(self) -> int:
        return 10 if self is ServerMode.GREETING else 8

    @property
    def reply(self) -> Reply:
        return {
            ServerMode.ECHO: echo_reply,
            ServerMode.HELLO: hello_reply,
            ServerMode.GREETING: greeting_reply,
        }[self]

    def banner(self, port: int) -> str:
        if self is ServerMode.ECHO:
            return "Server running...waiting for connections.\n"
        if self is ServerMode.HELLO:
            return f"Server running...waiting for connections on port {port}.\n"
        return f"Server listening on port {port}...\n"


def open_listener(host: str = "0.0.0.0", port: int = 3000, backlog: int = 8) -> socket.socket:
    """Create a TCP socket bound to host:port and listening."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(backlog)
    except OSError:
        sock.close()
        raise
    return sock


def handle_stream(conn: socket.socket, reply: Reply = echo_reply, out: Optional[TextIO] = None) -> int:
    """Answer every chunk received on conn until the peer closes; return the chunk count."""
    if out is None:
        out = sys.stdout
    fmt = _LOG_FORMATS.get(reply, "Received: {}\n")
    count = 0
    while data := conn.recv(MAXLINE):
        out.write(fmt.format(_text(data)))
        conn.sendall(reply(data))
        count += 1
    return count


def handle_once(conn: socket.socket, reply: Reply = greeting_reply, out: Optional[TextIO] = None) -> bool:
    """Receive one message, answer it once, and report whether that succeeded."""
    if out is None:
        out = sys.stdout
    try:
        data = conn.recv(GREETING_BUFFER)
    except OSError as exc:
        print(f"recv(): {exc}", file=sys.stderr)
        return False
    out.write(f"Received: {_text(data)}\n")
    response = reply(data)
    try:
        conn.sendall(response)
    except OSError as exc:
        print(f"send(): {exc}", file=sys.stderr)
        return False
    out.write(f"Sent: {_text(response)}\n")
    out.write("waiting from client request ...\n")
    return True


def serve(
    listener: socket.socket,
    mode: ServerMode = ServerMode.ECHO,
    out: Optional[TextIO] = None,
    limit: Optional[int] = None,
) -> int:
    """Accept and handle connections; stop after `limit` of them if given."""
    if out is None:
        out = sys.stdout
    port = listener.getsockname()[1]
    out.write(mode.banner(port))
    out.flush()
    handled = 0
    while limit is None or handled < limit:
        try:
            conn, _ = listener.accept()
        except OSError as exc:
            if mode is not ServerMode.GREETING:
                raise
            print(f"accept(): {exc}", file=sys.stderr)
            continue
        with conn:
            if mode is ServerMode.ECHO:
                out.write("Received request...\n")
            elif mode is ServerMode.GREETING:
                out.write("Connected to client...\n")
            if mode is ServerMode.GREETING:
                handle_once(conn, mode.reply, out)
            else:
                handle_stream(conn, mode.reply, out)
        out.flush()
        handled += 1
    return handled


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="echokit-server", description="Run a TCP echo server.")
    parser.add_argument("--mode", choices=[m.value for m in ServerMode], default=ServerMode.ECHO.value)
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int)
    args = parser.parse_args(argv)
    mode = ServerMode(args.mode)
    port = mode.default_port if args.port is None else args.port
    try:
        with open_listener(args.host, port, mode.backlog) as listener:
            serve(listener, mode, sys.stdout)
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        print(f"echokit-server: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())