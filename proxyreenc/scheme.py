"""Proxy re-encryption scheme over a symmetric pairing."""

from __future__ import annotations

from dataclasses import dataclass
from os import PathLike

from .pairing import G1Element, GTElement, Pairing

DEFAULT_PARAM_PATH = "params/a.param"
GENERATOR_SEED = b"fixed_generator_seed_for_project"


@dataclass(frozen=True)
class KeyPair:
    """Public key (g^alpha, g^beta, g^gamma) with its secret exponents."""

    alpha: G1Element
    beta: G1Element
    gamma: G1Element
    sk_alpha: int
    sk_beta: int
    sk_gamma: int


@dataclass(frozen=True)
class Ciphertext:
    """Second-level ciphertext (C1, C2, C3, C4, C5); C2 lies in GT."""

    c1: G1Element
    c2: GTElement
    c3: G1Element
    c4: G1Element
    c5: G1Element


@dataclass(frozen=True)
class ReEncryptedCiphertext:
    """Re-encrypted ciphertext (C1', C2', C3'); C1' lies in GT."""

    c1: GTElement
    c2: G1Element
    c3: G1Element


class PREContext:
    """Key generation, encryption, re-encryption and decryption."""

    def __init__(self, pairing: Pairing) -> None:
        self.pairing = pairing
        self.g = pairing.g1_from_hash(GENERATOR_SEED)
        self.keys: KeyPair | None = None

    @classmethod
    def from_param_file(cls, path: str | PathLike) -> PREContext:
        return cls(Pairing.from_file(path))

    def generate_keys(self) -> KeyPair:
        """Draw a fresh key pair."""
        a, b, c = (self.pairing.random_zr() for _ in range(3))
        return KeyPair(self.g ** a, self.g ** b, self.g ** c, a, b, c)

    def generate_user_keys(self) -> KeyPair:
        self.keys = self.generate_keys()
        return self.keys

    def generate_owner_keys(self) -> KeyPair:
        self.keys = self.generate_keys()
        return self.keys

    def hash_function(self, c1: G1Element, c2: GTElement, c3: G1Element) -> int:
        """H: G1 x GT x G1 -> Zr."""
        return self.pairing.zr_from_hash(c1.to_bytes() + c2.to_bytes() + c3.to_bytes())

    def encrypt(self, m: GTElement, alpha: G1Element, beta: G1Element) -> Ciphertext:
        """Encrypt ``m`` under the public key components g^alpha and g^beta."""
        order = self.pairing.r
        r = self.pairing.random_zr()
        s = self.pairing.random_zr()
        rs = r * s % order
        c1 = alpha ** r
        c3 = self.g ** rs
        c2 = m * self.pairing.apply(alpha, beta) ** rs
        c4 = self.g ** (r * self.hash_function(c1, c2, c3) % order)
        return Ciphertext(c1, c2, c3, c4, alpha)

    def generate_rekey(
        self, pk1_i: G1Element, sk_beta_i: int, pk3_j: G1Element, sk_alpha_i: int
    ) -> G1Element:
        """rk = (pk1_i)^(-beta_i) * (pk3_j)^(alpha_i)."""
        return pk1_i ** (-sk_beta_i) * pk3_j ** sk_alpha_i

    def verify(self, ct: Ciphertext, pk_alpha: G1Element) -> bool:
        """Check e(C1, g^H(C1,C2,C3)) == e(C4, pk_alpha)."""
        g_hash = self.g ** self.hash_function(ct.c1, ct.c2, ct.c3)
        return self.pairing.apply(ct.c1, g_hash) == self.pairing.apply(ct.c4, pk_alpha)

    def re_encrypt(self, ct: Ciphertext, rk: G1Element) -> ReEncryptedCiphertext:
        """C1' = C2 * e(rk, C3), C2' = C1, C3' = C3."""
        return ReEncryptedCiphertext(ct.c2 * self.pairing.apply(rk, ct.c3), ct.c1, ct.c3)

    def decrypt_delegate(
        self, c2: GTElement, c3: G1Element, pk_i: G1Element, sk_beta: int
    ) -> GTElement:
        """m = C2 * e(C3, pk_i)^(-beta)."""
        return c2 * self.pairing.apply(c3, pk_i) ** (-sk_beta)

    def decrypt_re(self, ct: ReEncryptedCiphertext, gamma_j: int) -> GTElement:
        """m = C1' * e(C2', C3')^(-gamma_j)."""
        return ct.c1 * self.pairing.apply(ct.c2, ct.c3) ** (-gamma_j)