"""TCP clients for the echo servers: interactive, confirming and single-shot."""

from __future__ import annotations

import argparse
import socket
import sys
from typing import Optional, TextIO

MAXLINE = 4096
CONFIRM_BUFFER = 1024
HELLO_SIZE = 100
DEFAULT_MESSAGE = "hello, client request"

_DEFAULT_PORTS = {"echo": 3000, "confirm": 8080, "hello": 3000}


class ServerClosedError(ConnectionError):
    """The server closed the connection before answering."""


def _text(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", "replace")


def connect(host: str = "127.0.0.1", port: int = 3000) -> socket.socket:
    """Open a TCP connection to host:port."""
    return socket.create_connection((host, port))


def interactive_echo(sock: socket.socket, inp: Optional[TextIO] = None, out: Optional[TextIO] = None) -> int:
    """Send each input line and print the reply until input ends; return the exchange count."""
    inp = sys.stdin if inp is None else inp
    out = sys.stdout if out is None else out
    count = 0
    while True:
        out.write("Enter your message: ")
        out.flush()
        line = inp.readline()
        if not line:
            return count
        sock.sendall(line.encode())
        data = sock.recv(MAXLINE)
        if not data:
            raise ServerClosedError("The server terminated prematurely")
        out.write("String received from the server: " + _text(data))
        out.flush()
        count += 1


def _read_choice(inp: TextIO) -> Optional[str]:
    """Return the first non-blank character typed, or None at end of input."""
    for line in iter(inp.readline, ""):
        stripped = line.lstrip()
        if stripped:
            return stripped[0]
    return None


def interactive_confirm(sock: socket.socket, inp: Optional[TextIO] = None, out: Optional[TextIO] = None) -> int:
    """Send messages one at a time, asking after each whether to go on; return the count sent."""
    inp = sys.stdin if inp is None else inp
    out = sys.stdout if out is None else out
    count = 0
    while True:
        out.write("\nEnter your message: ")
        out.flush()
        line = inp.readline()
        if not line:
            return count
        message = line.removesuffix("\n")
        out.write("Sending message to server... ")
        sock.sendall(message.encode())
        out.write("Sent.\n")
        data = sock.recv(CONFIRM_BUFFER - 1)
        out.write(f"Received: {_text(data)}\n")
        count += 1
        out.write("\nDo you want to continue? (y/n): ")
        out.flush()
        choice = _read_choice(inp)
        if choice is None or choice in "nN":
            return count


def send_hello(sock: socket.socket, message: str = DEFAULT_MESSAGE, out: Optional[TextIO] = None) -> str:
    """Send one fixed-size, NUL-padded message and return the server's reply text."""
    out = sys.stdout if out is None else out
    payload = message.encode()
    if len(payload) >= HELLO_SIZE:
        raise ValueError(f"message must be shorter than {HELLO_SIZE} bytes")
    sock.sendall(payload.ljust(HELLO_SIZE, b"\0"))
    reply = _text(sock.recv(HELLO_SIZE))
    out.write(f"\nServer sent: {reply} \n")
    out.flush()
    return reply


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="echokit-client", description="Talk to a TCP echo server.")
    parser.add_argument("--mode", choices=sorted(_DEFAULT_PORTS), default="echo")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int)
    parser.add_argument("--message", default=DEFAULT_MESSAGE)
    args = parser.parse_args(argv)
    if args.mode == "hello" and len(args.message.encode()) >= HELLO_SIZE:
        parser.error(f"--message must be shorter than {HELLO_SIZE} bytes")
    port = _DEFAULT_PORTS[args.mode] if args.port is None else args.port

    try:
        sock = connect(args.host, port)
    except OSError as exc:
        print(f"Problem in connecting to the server: {exc}", file=sys.stderr)
        return 3 if args.mode == "echo" else 1

    with sock:
        try:
            if args.mode == "echo":
                print("connected")
                interactive_echo(sock, sys.stdin, sys.stdout)
            elif args.mode == "confirm":
                interactive_confirm(sock, sys.stdin, sys.stdout)
            else:
                send_hello(sock, args.message, sys.stdout)
        except ServerClosedError as exc:
            print(exc, file=sys.stderr)
            return 4
        except KeyboardInterrupt:
            return 0
        except OSError as exc:
            print(f"echokit-client: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())