# echokit

echokit holds a small set of TCP servers and clients for trying out plain
socket conversations on your own machine. It uses only the Python standard
library.

## Installation

```
pip install .
```

## Servers

`echokit-server` listens on `0.0.0.0` by default and serves one client at a
time. `--mode` picks how it answers:

- **echo** (port 3000): every chunk received is printed and sent back
  unchanged, until the client closes the connection.
- **hello** (port 3000): every chunk is printed, and its text (up to the
  first NUL byte) is sent back with `...Request is completed by the server`
  and a newline added to the end.
- **greeting** (port 8080): one message is read from each client, printed,
  and answered with `Hello, Client!`; the connection is then closed.

`--host` and `--port` override the address and the mode's default port. The
server runs until interrupted; it exits with status 1 if the socket cannot be
opened.

```
echokit-server --mode hello --port 3000
```

## Clients

`echokit-client` connects to `127.0.0.1` by default (`--host`, `--port` to
change it) and talks to one of the servers, chosen with `--mode`:

- **echo** (port 3000): prints `connected`, then reads lines from standard
  input, sends each one, and prints what comes back, until input ends. If the
  server closes the connection before answering, it exits with status 4.
- **confirm** (port 8080): sends one line at a time with its newline removed,
  prints the reply, and asks `Do you want to continue? (y/n)`; it stops on
  `n` or `N`, or at the end of input.
- **hello** (port 3000): sends `--message` (default
  `hello, client request`) padded with NUL bytes to 100 bytes, prints the
  reply, and exits. The message must be shorter than 100 bytes.

If the connection cannot be made the client exits with status 3 in echo mode
and 1 otherwise.

```
echokit-client --mode hello --message "hello there"
```

## Using it from Python

```python
import sys
import threading

from echokit.servers import ServerMode, open_listener, serve
from echokit.clients import connect, send_hello

listener = open_listener("127.0.0.1", 3000, 8)
server = threading.Thread(target=serve, args=(listener, ServerMode.HELLO, sys.stdout, 1))
server.start()

with connect("127.0.0.1", 3000) as sock:
    reply = send_hello(sock, "hello, client request", sys.stdout)

server.join()
listener.close()
```

In `echokit.servers`:

- `open_listener(host, port, backlog)` returns a bound, listening socket.
- `serve(listener, mode, out, limit)` accepts connections and handles them
  the way `mode` says; with `limit` it stops after that many and returns the
  count.
- `handle_stream(conn, reply, out)` answers every chunk on one connection
  until the peer closes, and returns the number of chunks.
- `handle_once(conn, reply, out)` answers a single message and returns
  whether that succeeded.
- `echo_reply`, `hello_reply` and `greeting_reply` are the reply functions
  behind the three modes.

In `echokit.clients`:

- `connect(host, port)` opens a TCP connection.
- `interactive_echo(sock, inp, out)` and `interactive_confirm(sock, inp, out)`
  run the two interactive dialogues and return the number of messages sent.
  `interactive_echo` raises `ServerClosedError` if the server goes away.
- `send_hello(sock, message, out)` sends one padded message and returns the
  reply text; it raises `ValueError` for a message of 100 bytes or more.

Input and output streams are passed in, so everything can be driven from
tests.

## Limits

The servers handle connections one after another, never concurrently, and
there is no TLS, authentication or framing beyond what each mode describes.

## Running the tests

```
pip install .[test]
pytest
```