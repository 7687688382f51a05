"""Cloud server that stores keys and ciphertexts and re-encrypts on request."""

from __future__ import annotations

import argparse
import logging
import time
from contextlib import contextmanager
from enum import Enum
from typing import Iterator

from .pairing import G1Element
from .scheme import DEFAULT_PARAM_PATH, Ciphertext, PREContext
from .wire import TCPServer, recv_data, recv_element, send_element

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080


class Command(str, Enum):
    """Commands a client may send as the first frame of a connection."""

    UPLOAD_PK = "UPLOAD_PK"
    GET_PK = "GET_PK"
    UPLOAD_KEY = "UPLOAD_KEY"
    UPLOAD_CT = "UPLOAD_CT"
    GET_CT = "GET_CT"
    REQUEST_CT = "REQUEST_CT"


def _text(raw: bytes) -> str:
    """Decode a NUL-terminated string frame."""
    return raw.split(b"\0", 1)[0].decode("utf-8", "replace")


@contextmanager
def _timed(label: str) -> Iterator[None]:
    start = time.process_time()
    yield
    print(f"{label} {time.process_time() - start:f} time")


class CloudServer:
    """Holds a single user's public key, re-encryption key and ciphertext."""

    get_pk_delay = 2.0

    def __init__(self, pre: PREContext) -> None:
        self.pre = pre
        self.public_key: tuple[G1Element, G1Element, G1Element] | None = None
        self.rekey: G1Element | None = None
        self.ciphertext: Ciphertext | None = None

    def handle(self, conn) -> Command | None:
        """Serve one command on ``conn``; return it, or None if it is unknown."""
        name = _text(recv_data(conn))
        try:
            command = Command(name)
        except ValueError:
            logger.error("Unknown command received: %s", name)
            return None
        handlers = {
            Command.UPLOAD_PK: self._upload_pk,
            Command.GET_PK: self._get_pk,
            Command.UPLOAD_KEY: self._upload_key,
            Command.UPLOAD_CT: self._upload_ct,
            Command.GET_CT: self._get_ct,
            Command.REQUEST_CT: self._request_ct,
        }
        handlers[command](conn)
        return command

    def serve_forever(self, server: TCPServer) -> None:
        """Accept and serve connections one at a time until the socket is closed."""
        while True:
            try:
                conn = server.accept_connection()
            except OSError:
                return
            with conn:
                try:
                    self.handle(conn)
                except (OSError, ValueError) as exc:
                    logger.error("Connection failed: %s", exc)

    def _g1(self, conn) -> G1Element:
        return recv_element(conn, self.pre.pairing.g1_from_bytes)

    def _upload_pk(self, conn) -> None:
        with _timed("Stored Public key"):
            user_id = _text(recv_data(conn))
            self.public_key = (self._g1(conn), self._g1(conn), self._g1(conn))
        alpha, beta, gamma = self.public_key
        print(f"Stored public key for user {user_id}")
        print(f"User public key (α): {alpha}")
        print(f"User public key (β): {beta}")
        print(f"User public key (γ): {gamma}")

    def _get_pk(self, conn) -> None:
        with _timed("send public key to data_owner"):
            recv_data(conn)
        if self.public_key is None:
            logger.error("Error: Public key not received yet!")
            return
        for element in self.public_key:
            send_element(conn, element)
        print("Sent user public key to requester")
        time.sleep(self.get_pk_delay)

    def _upload_key(self, conn) -> None:
        with _timed("Received Reencryption"):
            recv_data(conn)
            self.rekey = self._g1(conn)
        print("Received re-encryption key from data_owner")
        print(f"Re-encryption key: {self.rekey}")

    def _upload_ct(self, conn) -> None:
        with _timed("Received ciphertext"):
            recv_data(conn)
            c1 = self._g1(conn)
            c2 = recv_element(conn, self.pre.pairing.gt_from_bytes)
            c3 = self._g1(conn)
            c4 = self._g1(conn)
            c5 = self._g1(conn)
            self.ciphertext = Ciphertext(c1, c2, c3, c4, c5)
        print("Received ciphertext")
        for label, element in zip(("C1", "C2", "C3", "C4", "C5"), (c1, c2, c3, c4, c5)):
            print(f"{label}: {element}")

    def _get_ct(self, conn) -> None:
        recv_data(conn)
        ct = self.ciphertext
        if ct is None:
            logger.error("Error: Ciphertext not received yet!")
            return
        for element in (ct.c1, ct.c2, ct.c3, ct.c4, ct.c5):
            send_element(conn, element)
        print("Sent original ciphertext C1-C5 to delegate.")

    def _request_ct(self, conn) -> None:
        recv_data(conn)
        ct, rk = self.ciphertext, self.rekey
        if ct is None or rk is None or self.public_key is None:
            logger.error("Error: Ciphertext or re-encryption key not received yet!")
            return
        if not self.pre.verify(ct, self.public_key[0]):
            logger.error("[Cloud] Ciphertext verification FAILED! Rejecting ciphertext.")
            return
        print("[Cloud] Ciphertext verification PASSED, proceeding to re-encryption.")
        with _timed("Re-encrypted cipher text"):
            re_ct = self.pre.re_encrypt(ct, rk)
        print(f"Re-encrypted c1': {re_ct.c1}")
        print(f"Re-encrypted c2': {re_ct.c2}")
        print(f"Re-encrypted c3': {re_ct.c3}")
        send_element(conn, re_ct.c1)
        send_element(conn, re_ct.c2)
        send_element(conn, re_ct.c3)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run the proxy re-encryption cloud server.")
    parser.add_argument("--params", default=DEFAULT_PARAM_PATH, help="pairing parameter file")
    parser.add_argument("--host", default="", help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        pre = PREContext.from_param_file(args.params)
    except OSError as exc:
        logger.error("Error opening param file: %s", exc)
        return 1

    cloud = CloudServer(pre)
    with TCPServer(args.port, args.host) as server:
        server.start()
        print(f"Cloud Server listening on port {server.port}...")
        try:
            cloud.serve_forever(server)
        except KeyboardInterrupt:
            pass
    return 0