"""Framed TCP transport for protocol commands and pairing elements.

Plain data frames carry an 8-byte little-endian length prefix; element
frames carry a 4-byte big-endian length prefix and at most
``MAX_ELEMENT_LENGTH`` bytes of serialized element.
"""

from __future__ import annotations

import logging
import socket
import struct
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

MAX_ELEMENT_LENGTH = 4096
LISTEN_BACKLOG = 3

_DATA_PREFIX = struct.Struct("<Q")
_ELEMENT_PREFIX = struct.Struct(">I")

T = TypeVar("T")


class ProtocolError(ConnectionError):
    """A frame was malformed, too large, or cut short."""


def _recv_exact(sock: socket.socket, length: int) -> bytes:
    chunks = bytearray()
    while len(chunks) < length:
        chunk = sock.recv(length - len(chunks))
        if not chunk:
            raise ProtocolError(f"connection closed after {len(chunks)}/{length} bytes")
        chunks += chunk
    return bytes(chunks)


def send_data(sock: socket.socket, data) -> None:
    """Send ``data`` preceded by its length."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    payload = bytes(data)
    sock.sendall(_DATA_PREFIX.pack(len(payload)) + payload)


def recv_data(sock: socket.socket) -> bytes:
    """Receive one frame written by :func:`send_data`."""
    (length,) = _DATA_PREFIX.unpack(_recv_exact(sock, _DATA_PREFIX.size))
    return _recv_exact(sock, length)


def send_element(sock: socket.socket, element) -> None:
    """Send the serialized form of a pairing element."""
    payload = element.to_bytes()
    if not 0 < len(payload) <= MAX_ELEMENT_LENGTH:
        raise ProtocolError(f"invalid element length {len(payload)}")
    sock.sendall(_ELEMENT_PREFIX.pack(len(payload)) + payload)


def recv_element(sock: socket.socket, decode: Callable[[bytes], T]) -> T:
    """Receive an element frame and turn its bytes into an element with ``decode``."""
    header = _recv_exact(sock, _ELEMENT_PREFIX.size)
    (length,) = _ELEMENT_PREFIX.unpack(header)
    if not 0 < length <= MAX_ELEMENT_LENGTH:
        raise ProtocolError(f"invalid element length {length}")
    payload = _recv_exact(sock, length)
    element = decode(payload)
    logger.debug("Received element (%d bytes)", length)
    return element


class TCPServer:
    """A listening TCP socket."""

    def __init__(self, port: int, host: str = "") -> None:
        self.host = host
        self.port = port
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

    def start(self) -> None:
        """Bind and start listening."""
        self.sock.bind((self.host, self.port))
        self.sock.listen(LISTEN_BACKLOG)
        self.port = self.sock.getsockname()[1]

    def accept_connection(self) -> socket.socket:
        conn, _ = self.sock.accept()
        return conn

    def close(self) -> None:
        self.sock.close()

    def __enter__(self) -> TCPServer:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class TCPClient:
    """A TCP connection to a server."""

    def __init__(self, ip: str, port: int) -> None:
        self.ip = ip
        self.port = port
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

    def connect(self) -> None:
        self.sock.connect((self.ip, self.port))

    def close(self) -> None:
        self.sock.close()

    def __enter__(self) -> TCPClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()