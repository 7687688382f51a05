import pytest

from proxyreenc.pairing import G1Element, GTElement, Pairing, PairingParams

R = 2**31 - 1
_BASES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)


def _is_prime(n):
    if n < 2:
        return False
    for p in _BASES:
        if n % p == 0:
            return n == p
    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1
    for a in _BASES:
        x = pow(a, d, n)
        if x in (1, n - 1):
            continue
        for _ in range(s - 1):
            x = x * x % n
            if x == n - 1:
                break
        else:
            return False
    return True


def _toy_params():
    k = 2**46
    while True:
        h = 4 * k
        q = h * R - 1
        if _is_prime(q):
            return PairingParams(q=q, r=R, h=h)
        k += 1


@pytest.fixture(scope="module")
def params():
    return _toy_params()


@pytest.fixture(scope="module")
def pairing(params):
    return Pairing(params)


def _identity(pairing):
    return pairing.g1_from_bytes(bytes(2 * pairing.field_length))


def test_parse_reads_all_keys(params):
    text = (
        f"type a\nq {params.q}\nh {params.h}\nr {params.r}\n"
        "exp2 31\nexp1 0\nsign1 -1\nsign0 -1\n"
    )
    parsed = PairingParams.parse(text)
    assert (parsed.q, parsed.r, parsed.h) == (params.q, params.r, params.h)
    assert parsed.exp2 == 31
    assert parsed.sign1 == -1


def test_parse_rejects_other_types(params):
    with pytest.raises(ValueError):
        PairingParams.parse(f"type d\nq {params.q}\nh {params.h}\nr {params.r}\n")


def test_parse_rejects_missing_key(params):
    with pytest.raises(ValueError):
        PairingParams.parse(f"type a\nh {params.h}\nr {params.r}\n")


def test_parse_rejects_inconsistent_values(params):
    with pytest.raises(ValueError):
        PairingParams.parse(f"type a\nq {params.q + 4}\nh {params.h}\nr {params.r}\n")


def test_parse_rejects_non_integer(params):
    with pytest.raises(ValueError):
        PairingParams.parse(f"type a\nq abc\nh {params.h}\nr {params.r}\n")


def test_from_file(tmp_path, params):
    path = tmp_path / "a.param"
    path.write_text(f"type a\nq {params.q}\nh {params.h}\nr {params.r}\n")
    assert Pairing.from_file(path).params == params


def test_g1_hash_is_deterministic_and_has_order_r(pairing):
    p = pairing.g1_from_hash(b"seed")
    assert p == pairing.g1_from_hash(b"seed")
    assert p != _identity(pairing)
    assert p ** R == _identity(pairing)


def test_g1_group_laws(pairing):
    p = pairing.g1_from_hash(b"point")
    assert p ** 5 * p ** 7 == p ** 12
    assert p ** (R + 1) == p
    assert p * p ** -1 == _identity(pairing)
    assert p * _identity(pairing) == p


def test_g1_mul_rejects_other_types(pairing):
    with pytest.raises(TypeError):
        pairing.g1_from_hash(b"x") * 3


def test_g1_bytes_round_trip(pairing):
    p = pairing.g1_from_hash(b"bytes")
    data = p.to_bytes()
    assert len(data) == 2 * pairing.field_length
    assert pairing.g1_from_bytes(data) == p
    assert pairing.g1_from_bytes(_identity(pairing).to_bytes()) == _identity(pairing)


def test_g1_from_bytes_errors(pairing):
    n = pairing.field_length
    with pytest.raises(ValueError):
        pairing.g1_from_bytes(bytes(2 * n - 1))
    off_curve = (1).to_bytes(n, "big") + (1).to_bytes(n, "big")
    with pytest.raises(ValueError):
        pairing.g1_from_bytes(off_curve)


def test_gt_bytes_round_trip_and_errors(pairing):
    m = pairing.gt_from_hash(b"HelloPRE123!")
    assert pairing.gt_from_bytes(m.to_bytes()) == m
    with pytest.raises(ValueError):
        pairing.gt_from_bytes(b"\x00")
    too_big = pairing.q.to_bytes(pairing.field_length, "big") * 2
    with pytest.raises(ValueError):
        pairing.gt_from_bytes(too_big)


def test_gt_hash_has_order_r(pairing):
    m = pairing.gt_from_hash("message")
    one = m ** 0
    assert m != one
    assert m ** R == one
    assert m ** 3 * m ** 4 == m ** 7


def test_pairing_is_bilinear(pairing):
    p = pairing.g1_from_hash(b"P")
    q = pairing.g1_from_hash(b"Q")
    a, b = 123456, 987654321
    assert pairing.apply(p ** a, q ** b) == pairing.apply(p, q) ** (a * b)
    assert pairing.apply(p * q, q) == pairing.apply(p, q) * pairing.apply(q, q)


def test_pairing_is_symmetric_and_non_degenerate(pairing):
    p = pairing.g1_from_hash(b"P")
    q = pairing.g1_from_hash(b"Q")
    e = pairing.apply(p, q)
    assert e == pairing.apply(q, p)
    assert pairing.apply(p, p) != e ** 0
    assert e ** R == e ** 0
    assert pairing.apply(p, _identity(pairing)) == e ** 0


def test_pairing_rejects_non_g1(pairing):
    m = pairing.gt_from_hash(b"m")
    with pytest.raises(TypeError):
        pairing.apply(m, pairing.g1_from_hash(b"P"))


def test_zr_hash_and_random(pairing):
    h = pairing.zr_from_hash(b"abc")
    assert h == pairing.zr_from_hash(b"abc")
    assert 0 <= h < R
    assert pairing.zr_from_hash(b"abc") != pairing.zr_from_hash(b"abd")
    assert all(0 <= pairing.random_zr() < R for _ in range(20))


def test_identity_string(pairing):
    assert str(_identity(pairing)) == "O"
    p = pairing.g1_from_hash(b"s")
    assert str(p) == f"[{p.x}, {p.y}]"