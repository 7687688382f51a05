"""Symmetric Type A pairing on the supersingular curve y^2 = x^3 + x over F_q.

G1 is the subgroup of order r of E(F_q); GT is the subgroup of order r of
F_q^2 = F_q[i] / (i^2 + 1).  Elements of Zr are plain integers modulo r.
"""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass, field
from itertools import count
from os import PathLike
from pathlib import Path

_Point = "tuple[int, int] | None"


def _expand(tag: bytes, data: bytes, length: int) -> bytes:
    """Stretch ``data`` into ``length`` pseudo-random bytes with SHA-256."""
    out = bytearray()
    for counter in count():
        if len(out) >= length:
            break
        out += hashlib.sha256(tag + counter.to_bytes(4, "big") + data).digest()
    return bytes(out[:length])


def _as_bytes(data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _point_add(p1, p2, q: int):
    if p1 is None:
        return p2
    if p2 is None:
        return p1
    x1, y1 = p1
    x2, y2 = p2
    if x1 == x2:
        if (y1 + y2) % q == 0:
            return None
        lam = (3 * x1 * x1 + 1) * pow(2 * y1, -1, q) % q
    else:
        lam = (y2 - y1) * pow(x2 - x1, -1, q) % q
    x3 = (lam * lam - x1 - x2) % q
    return x3, (lam * (x1 - x3) - y1) % q


def _point_mul(point, k: int, q: int):
    result = None
    for bit in bin(k)[2:]:
        result = _point_add(result, result, q)
        if bit == "1":
            result = _point_add(result, point, q)
    return result


def _fq2_mul(u, v, q: int):
    a, b = u
    c, d = v
    return (a * c - b * d) % q, (a * d + b * c) % q


def _fq2_inv(u, q: int):
    a, b = u
    inv = pow((a * a + b * b) % q, -1, q)
    return a * inv % q, -b * inv % q


def _fq2_pow(u, e: int, q: int):
    result = (1, 0)
    for bit in bin(e)[2:]:
        result = _fq2_mul(result, result, q)
        if bit == "1":
            result = _fq2_mul(result, u, q)
    return result


def _unitary(u, q: int):
    """Raise a non-zero element of F_q^2 to the power q - 1."""
    a, b = u
    return _fq2_mul((a, -b % q), _fq2_inv(u, q), q)


@dataclass(frozen=True)
class PairingParams:
    """Parameters of a Type A pairing: q + 1 = h * r and q = 3 (mod 4)."""

    q: int
    r: int
    h: int
    exp1: int | None = None
    exp2: int | None = None
    sign0: int | None = None
    sign1: int | None = None

    def __post_init__(self) -> None:
        if self.r < 3 or self.q < 3:
            raise ValueError("q and r must be at least 3")
        if self.q % 4 != 3:
            raise ValueError("q must be congruent to 3 modulo 4")
        if self.h * self.r != self.q + 1:
            raise ValueError("q + 1 must equal h * r")

    @classmethod
    def parse(cls, text: str) -> PairingParams:
        """Read parameters written as ``key value`` lines."""
        values: dict[str, str] = {}
        for lineno, raw in enumerate(text.splitlines(), 1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            parts = line.split()
            if len(parts) != 2:
                raise ValueError(f"line {lineno}: expected 'key value', got {line!r}")
            values[parts[0]] = parts[1]

        kind = values.get("type")
        if kind != "a":
            raise ValueError(f"unsupported pairing type {kind!r}")

        def number(key: str, required: bool) -> int | None:
            if key not in values:
                if required:
                    raise ValueError(f"missing parameter {key!r}")
                return None
            try:
                return int(values[key])
            except ValueError:
                raise ValueError(f"parameter {key!r} is not an integer") from None

        return cls(
            q=number("q", True),
            r=number("r", True),
            h=number("h", True),
            exp1=number("exp1", False),
            exp2=number("exp2", False),
            sign0=number("sign0", False),
            sign1=number("sign1", False),
        )


@dataclass(frozen=True)
class G1Element:
    """A point of G1; ``x`` and ``y`` are None for the point at infinity."""

    pairing: Pairing = field(compare=False, repr=False)
    x: int | None
    y: int | None

    @property
    def _point(self):
        return None if self.x is None else (self.x, self.y)

    def to_bytes(self) -> bytes:
        n = self.pairing.field_length
        if self.x is None:
            return bytes(2 * n)
        return self.x.to_bytes(n, "big") + self.y.to_bytes(n, "big")

    def __mul__(self, other: G1Element) -> G1Element:
        if not isinstance(other, G1Element):
            return NotImplemented
        return self.pairing._g1(_point_add(self._point, other._point, self.pairing.q))

    def __pow__(self, exponent: int) -> G1Element:
        if not isinstance(exponent, int) or isinstance(exponent, bool):
            return NotImplemented
        pairing = self.pairing
        return pairing._g1(_point_mul(self._point, exponent % pairing.r, pairing.q))

    def __str__(self) -> str:
        return "O" if self.x is None else f"[{self.x}, {self.y}]"


@dataclass(frozen=True)
class GTElement:
    """An element a + b*i of the order-r subgroup of F_q^2."""

    pairing: Pairing = field(compare=False, repr=False)
    a: int
    b: int

    def to_bytes(self) -> bytes:
        n = self.pairing.field_length
        return self.a.to_bytes(n, "big") + self.b.to_bytes(n, "big")

    def __mul__(self, other: GTElement) -> GTElement:
        if not isinstance(other, GTElement):
            return NotImplemented
        return self.pairing._gt(_fq2_mul((self.a, self.b), (other.a, other.b), self.pairing.q))

    def __pow__(self, exponent: int) -> GTElement:
        if not isinstance(exponent, int) or isinstance(exponent, bool):
            return NotImplemented
        pairing = self.pairing
        return pairing._gt(_fq2_pow((self.a, self.b), exponent % pairing.r, pairing.q))

    def __str__(self) -> str:
        return f"[{self.a}, {self.b}]"


class Pairing:
    """The reduced Tate pairing e: G1 x G1 -> GT with a distortion map."""

    def __init__(self, params: PairingParams) -> None:
        self.params = params
        self.q = params.q
        self.r = params.r
        self.h = params.h
        self.field_length = (self.q.bit_length() + 7) // 8

    @classmethod
    def from_file(cls, path: str | PathLike) -> Pairing:
        return cls(PairingParams.parse(Path(path).read_text()))

    def _g1(self, point) -> G1Element:
        if point is None:
            return G1Element(self, None, None)
        return G1Element(self, point[0], point[1])

    def _gt(self, value) -> GTElement:
        return GTElement(self, value[0], value[1])

    def random_zr(self) -> int:
        return secrets.randbelow(self.r)

    def zr_from_hash(self, data) -> int:
        length = (self.r.bit_length() + 7) // 8 + 16
        return int.from_bytes(_expand(b"Zr", _as_bytes(data), length), "big") % self.r

    def g1_from_hash(self, data) -> G1Element:
        data = _as_bytes(data)
        q = self.q
        for attempt in count():
            seed = attempt.to_bytes(4, "big") + data
            x = int.from_bytes(_expand(b"G1", seed, self.field_length + 16), "big") % q
            rhs = (x * x * x + x) % q
            y = pow(rhs, (q + 1) // 4, q)
            if y * y % q != rhs:
                continue
            point = _point_mul((x, y), self.h, q)
            if point is not None:
                return self._g1(point)
        raise AssertionError("unreachable")

    def gt_from_hash(self, data) -> GTElement:
        data = _as_bytes(data)
        q = self.q
        width = self.field_length + 16
        for attempt in count():
            seed = attempt.to_bytes(4, "big") + data
            raw = _expand(b"GT", seed, 2 * width)
            a = int.from_bytes(raw[:width], "big") % q
            b = int.from_bytes(raw[width:], "big") % q
            if a == 0 and b == 0:
                continue
            value = _fq2_pow(_unitary((a, b), q), self.h, q)
            if value != (1, 0):
                return self._gt(value)
        raise AssertionError("unreachable")

    def g1_from_bytes(self, data) -> G1Element:
        data = bytes(data)
        n = self.field_length
        if len(data) != 2 * n:
            raise ValueError(f"G1 element needs {2 * n} bytes, got {len(data)}")
        x = int.from_bytes(data[:n], "big")
        y = int.from_bytes(data[n:], "big")
        if x == 0 and y == 0:
            return self._g1(None)
        q = self.q
        if x >= q or y >= q:
            raise ValueError("coordinate out of range")
        if (y * y - x * x * x - x) % q != 0:
            raise ValueError("point is not on the curve")
        return self._g1((x, y))

    def gt_from_bytes(self, data) -> GTElement:
        data = bytes(data)
        n = self.field_length
        if len(data) != 2 * n:
            raise ValueError(f"GT element needs {2 * n} bytes, got {len(data)}")
        a = int.from_bytes(data[:n], "big")
        b = int.from_bytes(data[n:], "big")
        if a >= self.q or b >= self.q:
            raise ValueError("coordinate out of range")
        return self._gt((a, b))

    def apply(self, a: G1Element, b: G1Element) -> GTElement:
        """Compute e(a, b)."""
        if not isinstance(a, G1Element) or not isinstance(b, G1Element):
            raise TypeError("pairing arguments must be G1 elements")
        if a.x is None or b.x is None:
            return self._gt((1, 0))
        q = self.q
        px, py = a.x, a.y
        qx, qy = b.x, b.y
        f = (1, 0)
        tx, ty = px, py
        for bit in bin(self.r)[3:]:
            lam = (3 * tx * tx + 1) * pow(2 * ty, -1, q) % q
            line = ((lam * (qx + tx) - ty) % q, qy)
            f = _fq2_mul(_fq2_mul(f, f, q), line, q)
            nx = (lam * lam - 2 * tx) % q
            ty = (lam * (tx - nx) - ty) % q
            tx = nx
            if bit == "1":
                if tx == px and (ty + py) % q == 0:
                    # Vertical line: its value lies in F_q and vanishes in the final exponentiation.
                    break
                if tx == px:
                    lam = (3 * tx * tx + 1) * pow(2 * ty, -1, q) % q
                else:
                    lam = (py - ty) * pow(px - tx, -1, q) % q
                line = ((lam * (qx + tx) - ty) % q, qy)
                f = _fq2_mul(f, line, q)
                nx = (lam * lam - tx - px) % q
                ty = (lam * (tx - nx) - ty) % q
                tx = nx
        return self._gt(_fq2_pow(_unitary(f, q), self.h, q))