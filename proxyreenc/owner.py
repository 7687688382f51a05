"""Data owner: fetch a user's public key, encrypt for them and upload a re-encryption key."""

from __future__ import annotations

import argparse
import logging
import time
from contextlib import contextmanager
from typing import Iterator

from .pairing import G1Element
from .scheme import DEFAULT_PARAM_PATH, Ciphertext, PREContext
from .server import DEFAULT_PORT, Command
from .wire import TCPClient, recv_element, send_data, send_element

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "HelloPRE123!"


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


def run_owner(
    pre: PREContext,
    server_ip: str,
    user_id: str,
    port: int = DEFAULT_PORT,
    message: str = DEFAULT_MESSAGE,
) -> tuple[Ciphertext, G1Element]:
    """Encrypt ``message`` for ``user_id`` and upload the ciphertext and re-encryption key.

    The owner's keys are left in ``pre.keys``; the ciphertext and the
    re-encryption key are returned.
    """
    with _timed("Owner key generate"):
        owner = pre.generate_owner_keys()
    print("Data Owner")
    print(f"Owner α_i: {owner.alpha}")
    print(f"Owner β_i: {owner.beta}")
    print(f"Owner γ_i: {owner.gamma}")
    print(f"User secret key 1 : {owner.sk_alpha}")
    print(f"User secret key 2 : {owner.sk_beta}")
    print(f"User secret key 3 : {owner.sk_gamma}")

    with _session(server_ip, port, Command.GET_PK, user_id) as sock:
        alpha_j = recv_element(sock, pre.pairing.g1_from_bytes)
        beta_j = recv_element(sock, pre.pairing.g1_from_bytes)
        gamma_j = recv_element(sock, pre.pairing.g1_from_bytes)

    print("Data User's public key fetching")
    print(f"User public key (α): {alpha_j}")
    print(f"User public key (β): {beta_j}")
    print(f"User public key (γ): {gamma_j}")

    with _timed("fixed message generate"):
        m = pre.pairing.gt_from_hash(message)
    print(f"Fixed Message Generate: {m}")

    with _timed("Encryption"):
        ct = pre.encrypt(m, alpha_j, beta_j)
    print("Encrypted 5-component ciphertext")
    for label, element in zip(("C1", "C2", "C3", "C4", "C5"), (ct.c1, ct.c2, ct.c3, ct.c4, ct.c5)):
        print(f"{label}: {element}")

    with _timed("Re Encryption key generate"):
        rk = pre.generate_rekey(owner.alpha, owner.sk_beta, gamma_j, owner.sk_alpha)
    print(f"Re Encryption key generated(rk): {rk}")

    with _session(server_ip, port, Command.UPLOAD_KEY, user_id) as sock:
        send_element(sock, rk)

    with _session(server_ip, port, Command.UPLOAD_CT, user_id) as sock:
        for element in (ct.c1, ct.c2, ct.c3, ct.c4, ct.c5):
            send_element(sock, element)

    return ct, rk


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Encrypt a message for a data user.")
    parser.add_argument("server_ip", help="address of the cloud server")
    parser.add_argument("owner_id", help="identifier of this data owner")
    parser.add_argument("user_id", help="identifier of the data user")
    parser.add_argument("--params", default=DEFAULT_PARAM_PATH, help="pairing parameter file")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="cloud server port")
    parser.add_argument("--message", default=DEFAULT_MESSAGE, help="message to encrypt")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        pre = PREContext.from_param_file(args.params)
    except OSError as exc:
        logger.error("Error opening param file: %s", exc)
        return 1

    try:
        run_owner(pre, args.server_ip, args.user_id, args.port, args.message)
    except (OSError, ValueError) as exc:
        logger.error("Data owner failed: %s", exc)
        return 1
    return 0