# proxyreenc

A proxy re-encryption scheme on a symmetric (Type A) bilinear pairing,
together with the three parties that use it over TCP:

- a **cloud server** that stores a user's public key, the owner's ciphertext
  and a re-encryption key, checks the ciphertext and re-encrypts it on request;
- a **data owner** who fetches the user's public key, encrypts a message for
  them, derives a re-encryption key and uploads both to the server;
- a **data user** who publishes their public key, fetches the original
  ciphertext and the re-encrypted one, and decrypts both.

The pairing arithmetic (curve `y^2 = x^3 + x` over `F_q`, reduced Tate
pairing into `F_q^2`) is written in pure Python; the package has no runtime
dependencies.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Pairing parameters

Every party reads its pairing parameters from a text file, by default
`params/a.param` relative to the working directory. The package does not
ship such a file. It holds `key value` lines; blank lines and lines starting
with `#` are ignored. `type` must be `a`, and the integers `q`, `r` and `h`
are required, with `q = 3 (mod 4)` and `h * r = q + 1`. The keys `exp1`,
`exp2`, `sign0` and `sign1` are accepted and kept but not needed.

All parties must load the same parameters: the generator `g` is obtained by
hashing a fixed seed into G1, so equal parameters give an equal generator.

## Running the protocol

Start the cloud server:

```
proxyreenc-server [--params PATH] [--host HOST] [--port PORT]
```

It listens on port 8080 by default and serves one connection at a time.

Start the data user, who uploads their public key and then waits (10 seconds
by default) before asking for the original and the re-encrypted ciphertext:

```
proxyreenc-user <server_ip> <user_id> [--params PATH] [--port PORT] [--wait SECONDS]
```

While the user is waiting, run the data owner, who encrypts the message
(`HelloPRE123!` by default, hashed into GT) for that user:

```
proxyreenc-owner <server_ip> <owner_id> <user_id> [--params PATH] [--port PORT] [--message TEXT]
```

Each party prints the keys, ciphertext components and the processor time of
each step. At the end the user prints both decrypted messages, which should
be equal.

The server understands the commands `UPLOAD_PK`, `GET_PK`, `UPLOAD_KEY`,
`UPLOAD_CT`, `GET_CT` and `REQUEST_CT`, each sent as the first frame of a
fresh connection and followed by a user id frame. Before re-encrypting, it
checks that `e(C1, g^H(C1, C2, C3)) == e(C4, pk_alpha)` and refuses the
ciphertext otherwise. After answering `GET_PK` it pauses two seconds.

## Using the library

- `proxyreenc.pairing` — `PairingParams.parse`, `Pairing` (`from_file`,
  `random_zr`, `zr_from_hash`, `g1_from_hash`, `gt_from_hash`,
  `g1_from_bytes`, `gt_from_bytes`, `apply`) and the group elements
  `G1Element` and `GTElement`, which support `*`, `**` with an integer
  exponent, and `to_bytes`. Elements of Zr are plain integers.
- `proxyreenc.scheme` — `PREContext` with `generate_keys`,
  `generate_user_keys`, `generate_owner_keys`, `hash_function`, `encrypt`,
  `generate_rekey`, `verify`, `re_encrypt`, `decrypt_delegate` and
  `decrypt_re`, and the values `KeyPair`, `Ciphertext` and
  `ReEncryptedCiphertext`. Build one with `PREContext(pairing)` or
  `PREContext.from_param_file(path)`.
- `proxyreenc.wire` — framing helpers `send_data` / `recv_data` (8-byte
  little-endian length prefix) and `send_element` / `recv_element` (4-byte
  big-endian length prefix, at most 4096 bytes), `TCPServer`, `TCPClient`
  and `ProtocolError`, raised for malformed, oversized or cut-short frames.
- `proxyreenc.server` — `CloudServer` with `handle(conn)` and
  `serve_forever(server)`, and the `Command` enum.
- `proxyreenc.owner` — `run_owner(pre, server_ip, user_id, port, message)`,
  which returns the ciphertext and the re-encryption key.
- `proxyreenc.user` — `run_user(pre, server_ip, user_id, port, wait)`,
  which returns the two decrypted messages.

```python
from proxyreenc.pairing import Pairing, PairingParams
from proxyreenc.scheme import PREContext

pre = PREContext(Pairing(PairingParams.parse(open("params/a.param").read())))
owner = pre.generate_keys()
user = pre.generate_keys()

m = pre.pairing.gt_from_hash("HelloPRE123!")
ct = pre.encrypt(m, user.alpha, user.beta)
assert pre.decrypt_delegate(ct.c2, ct.c3, user.alpha, user.sk_beta) == m

rk = pre.generate_rekey(owner.alpha, owner.sk_beta, user.gamma, owner.sk_alpha)
```

## What it does not do

- The cloud server keeps everything in memory and holds data for a single
  user: each upload replaces the previous one, and nothing survives a
  restart.
- There is no authentication; the user id frame is read but not checked.
- When the server cannot answer (no public key, ciphertext or
  re-encryption key yet, a failed check, or an unknown command) it logs an
  error and closes the connection without an error reply, so the client
  sees the connection end.
- The hashes into Zr, G1 and GT are built on SHA-256 in this package's own
  way; elements and hashes are not meant to match other pairing libraries.