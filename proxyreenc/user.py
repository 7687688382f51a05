"""Data user: publish a public key, then fetch and decrypt both ciphertext forms."""

from __future__ import annotations

import argparse
import logging
import time
from contextlib import contextmanager
from typing import Iterator

from .pairing import GTElement
from .scheme import DEFAULT_PARAM_PATH, Ciphertext, PREContext, ReEncryptedCiphertext
from .server import DEFAULT_PORT, Command
from .wire import TCPClient, recv_element, send_data, send_element

logger = logging.getLogger(__name__)

DEFAULT_WAIT = 10.0


@contextmanager
def _timed(label: str) -> Iterator[None]:
    start = time.process_time()
    yield
    print(f"{label} {time.process_time() - start:f} time")


@contextmanager
def _session(server_ip: str, port: int, command: Command, user_id: str) -> Iterator:
    """Open a connection, send the command and user id, and yield the socket."""
    with TCPClient(server_ip, port) as client:
        client.connect()
        send_data(client.sock, command.value + "\0")
        send_data(client.sock, user_id + "\0")
        yield client.sock


def run_user(
    pre: PREContext,
    server_ip: str,
    user_id: str,
    port: int = DEFAULT_PORT,
    wait: float = DEFAULT_WAIT,
) -> tuple[GTElement, GTElement]:
    """Publish keys, wait ``wait`` seconds, then fetch and decrypt.

    The user's keys are left in ``pre.keys``.  Returns the message from
    direct decryption and the message from decryption of the re-encrypted
    ciphertext.
    """
    with _timed("User keys generate"):
        keys = pre.generate_user_keys()
    print("User")
    print(f"User public key 1 : {keys.alpha}")
    print(f"User public key 2 : {keys.beta}")
    print(f"User public key 3 : {keys.gamma}")
    print(f"User secret key 1 : {keys.sk_alpha}")
    print(f"User secret key 2 : {keys.sk_beta}")
    print(f"User secret key 3 : {keys.sk_gamma}")

    with _session(server_ip, port, Command.UPLOAD_PK, user_id) as sock:
        for element in (keys.alpha, keys.beta, keys.gamma):
            send_element(sock, element)

    time.sleep(wait)

    pairing = pre.pairing
    with _session(server_ip, port, Command.GET_CT, user_id) as sock:
        with _timed("Received original ciphertext"):
            ct = Ciphertext(
                recv_element(sock, pairing.g1_from_bytes),
                recv_element(sock, pairing.gt_from_bytes),
                recv_element(sock, pairing.g1_from_bytes),
                recv_element(sock, pairing.g1_from_bytes),
                recv_element(sock, pairing.g1_from_bytes),
            )
    print("Received original ciphertext from cloud")
    for label, element in zip(("C1", "C2", "C3", "C4", "C5"), (ct.c1, ct.c2, ct.c3, ct.c4, ct.c5)):
        print(f"{label}: {element}")

    with _session(server_ip, port, Command.REQUEST_CT, user_id) as sock:
        with _timed("Received Re-encrypted"):
            re_ct = ReEncryptedCiphertext(
                recv_element(sock, pairing.gt_from_bytes),
                recv_element(sock, pairing.g1_from_bytes),
                recv_element(sock, pairing.g1_from_bytes),
            )
    print("Received re-encrypted ciphertext")
    print(f"C1': {re_ct.c1}")
    print(f"C2': {re_ct.c2}")
    print(f"C3': {re_ct.c3}")

    print("Decryption")
    with _timed("Direct Decryption"):
        m1 = pre.decrypt_delegate(ct.c2, ct.c3, keys.alpha, keys.sk_beta)
    print(f"Direct Ciphertext : Decryption m1 : {m1}")

    with _timed("Received Reencryption's Decryption"):
        m2 = pre.decrypt_re(re_ct, keys.sk_gamma)
    print(f"Re-Encrypted Decryption  m2 : {m2}")

    return m1, m2


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Receive and decrypt data as a data user.")
    parser.add_argument("server_ip", help="address of the cloud server")
    parser.add_argument("user_id", help="identifier of this data user")
    parser.add_argument("--params", default=DEFAULT_PARAM_PATH, help="pairing parameter file")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="cloud server port")
    parser.add_argument(
        "--wait",
        type=float,
        default=DEFAULT_WAIT,
        help="seconds to wait for the data owner before fetching",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        pre = PREContext.from_param_file(args.params)
    except OSError as exc:
        logger.error("Error opening param file: %s", exc)
        return 1

    try:
        run_user(pre, args.server_ip, args.user_id, args.port, args.wait)
    except (OSError, ValueError) as exc:
        logger.error("Data user failed: %s", exc)
        return 1
    return 0