"""Control server: accepts player clients and tells them when and what to play."""

from __future__ import annotations

import os
import select
import socket
import subprocess
import sys
import time
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from superwav.utils import current_timestamp, key_pressed, time_to_start_in_seconds

MAX_CLIENTS = 30
DEFAULT_BACKLOG = 5
POLL_INTERVAL = 1.0
START_DELAY_SECONDS = 10
START_CLIENT_ID = 1
EXIT_CLIENT_ID = -1
CLIENT_PROGRAM = "./../client/SuperWavAppClient"
TIME_DELAY_FILE = "./timeDellay.txt"

USAGE = "Wrong use of the program! For help use -h option."
HELP = "To use the program:\nAs a Server:\nSuperWavAppServer <PortNumber>"


def format_data(time_to_start: int, client_id: int) -> str:
    """The notification sent to every client."""
    return f"StartTime: {time_to_start},IDClient: {client_id}"


def write_time_delay(delay: int, path: str | Path = TIME_DELAY_FILE) -> None:
    """Append the current timestamp and ``delay`` as one tab separated line."""
    with open(path, "a", encoding="utf-8") as log:
        log.write(f"\t{current_timestamp()}\t{delay}\n")


def _backlog() -> int:
    value = os.environ.get("LISTENQ")
    if value is None:
        return DEFAULT_BACKLOG
    try:
        return int(value.strip())
    except ValueError:
        return 0


class Server:
    """A listening TCP server that numbers its clients and broadcasts to them."""

    poll_interval = POLL_INTERVAL
    start_pause = 1.0
    client_program = CLIENT_PROGRAM

    def __init__(self, port: int, max_clients: int = MAX_CLIENTS) -> None:
        if max_clients < 0:
            raise ValueError(f"max_clients must not be negative, got {max_clients}")
        self.max_clients = max_clients
        self.clients: list[tuple[int, socket.socket]] = []
        self.playing = False
        self._next_id = START_CLIENT_ID
        self._children: list[subprocess.Popen] = []

        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind(("", port))
            listener.listen(_backlog())
        except OSError:
            listener.close()
            raise
        self._listener = listener
        print("Waiting for connections ...")

    @property
    def port(self) -> int:
        """The port the server listens on."""
        return self._listener.getsockname()[1]

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def accept_pending(self, timeout: float | None = None) -> int | None:
        """Accept one waiting connection and send it its number.

        Returns the new client's number, or None when nothing was accepted.
        """
        wait = self.poll_interval if timeout is None else timeout
        readable, _, _ = select.select([self._listener], [], [], wait)
        if not readable:
            return None

        conn, (host, port) = self._listener.accept()
        if len(self.clients) >= self.max_clients:
            print(f"Too many clients, connection from {host}:{port} refused", file=sys.stderr)
            conn.close()
            return None

        client_id = self._next_id
        self._next_id += 1
        self.clients.append((client_id, conn))
        print(
            f"New connection , socket fd is {conn.fileno()} , ip is : {host} , port : {port} "
        )
        try:
            conn.sendall(str(client_id).encode())
        except OSError as exc:
            print(f"***Error in Send: {exc}.", file=sys.stderr)
        return client_id

    def notify_clients(self, time_to_start: int, client_id: int) -> None:
        """Send the start time and client number to every connected client."""
        if time_to_start > 0:
            print(f"Time to start: {time_to_start}")
        payload = format_data(time_to_start, client_id).encode()
        alive = []
        for number, conn in self.clients:
            try:
                conn.sendall(payload)
            except OSError as exc:
                print(f"***Error in Send: {exc}.", file=sys.stderr)
                conn.close()
                continue
            alive.append((number, conn))
        self.clients = alive

    def _launch_client(self) -> None:
        args = [self.client_program, "localhost", str(self.port)]
        print(str(self.port), end="")
        try:
            self._children.append(subprocess.Popen(args))
        except OSError as exc:
            print(f"Error fork client: {exc}", file=sys.stderr)

    def handle_key(self, key: str, input_stream: TextIO | None = None) -> bool:
        """Act on one key press; returns False when the server should stop."""
        stream = sys.stdin if input_stream is None else input_stream
        if key == "a":
            if self.playing:
                print("\nAlready playing!")
            else:
                self._launch_client()
        elif key == "s":
            if self.playing:
                print("\nAlready playing!")
            else:
                self.playing = True
                time.sleep(self.start_pause)
                print(f"\nSTART Music in {START_DELAY_SECONDS} seconds !")
                self.notify_clients(
                    time_to_start_in_seconds(START_DELAY_SECONDS), START_CLIENT_ID
                )
        elif key == "p":
            print("ID Client to sing: ")
            line = stream.readline()
            try:
                client_id = int(line.strip())
            except ValueError:
                print(f"invalid client number: {line.strip()!r}", file=sys.stderr)
            else:
                self.notify_clients(0, client_id)
        elif key == "e":
            sys.stdout.flush()
            self.notify_clients(0, EXIT_CLIENT_ID)
            return False
        else:
            print(f"\n Has presionado {key}")
        return True

    def serve(self, input_stream: TextIO | None = None) -> None:
        """Accept clients and react to keys until 'e' is pressed or input ends."""
        stream = sys.stdin if input_stream is None else input_stream
        while True:
            self.accept_pending()
            if key_pressed(stream):
                key = stream.read(1)
                if not key:
                    return
                if not self.handle_key(key, stream):
                    return

    def close(self) -> None:
        """Close every client connection and the listening socket."""
        for _, conn in self.clients:
            conn.close()
        self.clients = []
        self._listener.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Start the control server on the given port."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(USAGE)
        return 1
    if len(args) == 1 and args[0] == "-h":
        print(HELP)
        return 0

    try:
        port = int(args[0])
    except ValueError:
        port = 0
    print(f"\n***********************\nPort Number: {port}\n***********************")

    try:
        with Server(port) as server:
            server.serve(sys.stdin)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())