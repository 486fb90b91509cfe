"""
Pytest fixtures for the RCON tests.

FakeRconServer speaks the HLL RCON v2 wire protocol on loopback: it sends
its XOR key on connect, expects ``login <password>`` and then answers
commands from a canned table or a handler function.
"""

import socket
import threading

import pytest

from rcon_cipher import MSGLEN, decode_response, xor_crypt

TEST_KEY = bytes(range(1, 40)) + b"hll-rcon-key"
TEST_PASSWORD = "hunter2"


class FakeRconServer:
    def __init__(self, key=TEST_KEY, password=TEST_PASSWORD):
        self.key = key
        self.password = password
        self.responses = {}
        self.handler = None
        self.commands = []
        self.connections = 0
        self.lock = threading.Lock()
        self._stop = threading.Event()
        self._clients = []
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._listener.bind(("127.0.0.1", 0))
        self._listener.listen(16)
        self._listener.settimeout(0.1)
        self.host, self.port = self._listener.getsockname()

    def start(self):
        threading.Thread(target=self._accept_loop, daemon=True).start()
        return self

    def stop(self):
        self._stop.set()
        self._listener.close()
        with self.lock:
            clients = list(self._clients)
        for conn in clients:
            try:
                conn.close()
            except OSError:
                pass

    def _accept_loop(self):
        while not self._stop.is_set():
            try:
                conn, _ = self._listener.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            conn.settimeout(None)
            with self.lock:
                self.connections += 1
                self._clients.append(conn)
            threading.Thread(target=self._serve, args=(conn,), daemon=True).start()

    def _serve(self, conn):
        try:
            conn.sendall(self.key)
            while True:
                data = conn.recv(MSGLEN)
                if not data:
                    return
                line = decode_response(data, self.key)
                with self.lock:
                    self.commands.append(line)
                reply = self.reply(line)
                if reply is None:
                    return
                conn.sendall(xor_crypt(reply.encode(), self.key))
        except OSError:
            return
        finally:
            conn.close()

    def reply(self, line):
        if line.startswith("login "):
            return "SUCCESS" if line[len("login "):] == self.password else "FAIL"
        if self.handler is not None:
            return self.handler(line)
        return self.responses.get(line, "FAIL")


@pytest.fixture
def rcon_server():
    server = FakeRconServer().start()
    yield server
    server.stop()
