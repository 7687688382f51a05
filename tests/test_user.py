import threading
import time

import pytest

from proxyreenc.owner import DEFAULT_MESSAGE, run_owner
from proxyreenc.pairing import Pairing, PairingParams
from proxyreenc.scheme import PREContext
from proxyreenc.server import CloudServer
from proxyreenc.user import main, run_user
from proxyreenc.wire import ProtocolError, TCPServer


@pytest.fixture
def pairing():
    return Pairing(PairingParams(q=12107, r=1009, h=12))


@pytest.fixture
def cloud(pairing):
    server = CloudServer(PREContext(pairing))
    server.get_pk_delay = 0
    return server


@pytest.fixture
def serve():
    started = []

    def start(cloud, count):
        server = TCPServer(0, "127.0.0.1")
        server.start()

        def loop():
            for _ in range(count):
                conn = server.accept_connection()
                with conn:
                    try:
                        cloud.handle(conn)
                    except (OSError, ValueError):
                        pass

        thread = threading.Thread(target=loop, daemon=True)
        thread.start()
        started.append((server, thread))
        return server.port, thread

    yield start
    for server, thread in started:
        thread.join(timeout=5)
        server.close()


def test_full_exchange(pairing, cloud, serve):
    port, _ = serve(cloud, 6)
    user_pre = PREContext(pairing)
    results = []
    errors = []

    def user():
        try:
            results.append(run_user(user_pre, "127.0.0.1", "bob", port, 2.0))
        except Exception as exc:  # noqa: BLE001
            errors.append(exc)

    thread = threading.Thread(target=user, daemon=True)
    thread.start()
    deadline = time.monotonic() + 10
    while cloud.public_key is None and time.monotonic() < deadline:
        time.sleep(0.01)
    run_owner(PREContext(pairing), "127.0.0.1", "bob", port)
    thread.join(timeout=60)

    assert errors == []
    m1, _ = results[0]
    assert m1 == pairing.gt_from_hash(DEFAULT_MESSAGE)
    keys = user_pre.keys
    assert cloud.public_key == (keys.alpha, keys.beta, keys.gamma)


def test_missing_ciphertext_raises(pairing, cloud, serve):
    port, _ = serve(cloud, 2)
    user_pre = PREContext(pairing)
    with pytest.raises(ProtocolError):
        run_user(user_pre, "127.0.0.1", "bob", port, 0)
    keys = user_pre.keys
    assert cloud.public_key == (keys.alpha, keys.beta, keys.gamma)


def test_missing_rekey_raises(pairing, cloud, serve):
    other = PREContext(pairing)
    keys = other.generate_keys()
    cloud.ciphertext = other.encrypt(pairing.gt_from_hash("x"), keys.alpha, keys.beta)
    port, _ = serve(cloud, 3)
    with pytest.raises(ProtocolError):
        run_user(PREContext(pairing), "127.0.0.1", "bob", port, 0)
    assert cloud.rekey is None


def test_main_requires_two_arguments():
    with pytest.raises(SystemExit) as info:
        main(["127.0.0.1"])
    assert info.value.code == 2


def test_main_missing_param_file(tmp_path):
    missing = tmp_path / "missing.param"
    assert main(["--params", str(missing), "127.0.0.1", "bob"]) == 1