"""
feedcrypt -- Live Demo: every suite behind the codec contract
=============================================================
Run:  python examples/demo_codecs.py

Encodes a few log records with each suite, decodes them on a matched
reader, and prints record sizes and timings. Also shows what each suite
does when a record is tampered with or dropped.
"""

import logging
import os
import sys
import time
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from feedcrypt import (
    AuthenticationFailure,
    StreamTruncated,
    encryption_key,
    instance_codec,
    secretbox_codec,
    secretstream_codec,
    stream_codec,
)
from feedcrypt.suites import decrypt_stream, encrypt_stream

logging.basicConfig(level=logging.INFO, format=" %(name)s: %(message)s")

LINE    = "═" * 70
RECORDS = [{"seq": i, "body": f"log entry {i}"} for i in range(3)]

def header(name):
    print(f"\n{LINE}")
    print(f"  {name}")
    print(LINE)

def ok(label, value=""):
    print(f"  ✓  {label}{f': {value}' if value else ''}")

def flip(record: bytes, index: int = -1) -> bytes:
    tampered = bytearray(record)
    tampered[index] ^= 0x01
    return bytes(tampered)

print(f"\n{LINE}")
print("  feedcrypt -- Encrypted Value Codecs Demo")
print(LINE)
key = encryption_key()

# ── AEAD-SecretBox ───────────────────────────────────────────────────────────
header("secretbox -- XChaCha20-Poly1305, random nonce per record")
t0     = time.perf_counter()
codec  = secretbox_codec(key, value_encoding="json")
cts    = [codec.encode(r) for r in RECORDS]
pts    = [codec.decode(c) for c in reversed(cts)]
elapsed = time.perf_counter() - t0
ok("Record size", f"{len(cts[0])} bytes (nonce=24 + data + MAC=16)")
ok("Decoded in reverse order", str(pts[::-1] == RECORDS))
ok("Round-trip", f"{elapsed*1000:.2f} ms")
try:
    codec.decode(flip(cts[0]))
except AuthenticationFailure:
    ok("Tampered record", "AuthenticationFailure")

# ── Stream-XOR stateless ─────────────────────────────────────────────────────
header("xor -- ChaCha20 keystream, one nonce per session (NO MAC)")
writer = stream_codec(key, value_encoding="json")
reader = stream_codec(key, value_encoding="json", nonce=writer.nonce)
cts    = [writer.encode(r) for r in RECORDS]
ok("Nonce shared out of band", writer.nonce.hex())
ok("Record size", f"{len(cts[0])} bytes (same as plaintext)")
ok("Decoded", str([reader.decode(c) for c in cts] == RECORDS))

# ── Stream-XOR instance ──────────────────────────────────────────────────────
header("xor-instance -- ChaCha20 with ordered tx/rx cursors (NO MAC)")
writer = instance_codec(key, value_encoding="utf-8")
reader = instance_codec(key, value_encoding="utf-8", nonce=writer.nonce)
cts    = [writer.encode(r["body"]) for r in RECORDS]
ok("Decoded in order", str([reader.decode(c) for c in cts]))
late   = instance_codec(key, nonce=writer.nonce)
ok("Record 2 decoded first", repr(late.decode(cts[2])))

# ── Streaming-AEAD ───────────────────────────────────────────────────────────
header("secretstream -- chained XChaCha20-Poly1305 stream, rekeyable")
t0      = time.perf_counter()
chunks  = [f"chunk {i}".encode() for i in range(8)]
records = list(encrypt_stream(key, chunks, rekey_every=3))
out     = list(decrypt_stream(key, records))
elapsed = time.perf_counter() - t0
ok("Header", f"{len(records[0])} bytes, then {len(records) - 1} chunks")
ok("Decoded", str(out == chunks))
ok("Round-trip", f"{elapsed*1000:.2f} ms")
try:
    list(decrypt_stream(key, records[:-1]))
except StreamTruncated:
    ok("Final chunk dropped", "StreamTruncated")
try:
    list(decrypt_stream(key, [records[0], records[2], records[1]] + records[3:]))
except AuthenticationFailure:
    ok("Chunks reordered", "AuthenticationFailure")

writer = secretstream_codec(key, value_encoding="json")
reader = secretstream_codec(key, value_encoding="json", header=writer.header)
cts    = [writer.encode(r) for r in RECORDS[:-1]] + [writer.encode_final(RECORDS[-1])]
ok("Codec stream", str([reader.decode(c) for c in cts] == RECORDS))
reader.suite.finish()

print(f"\n{LINE}")
print("  secretbox, secretstream  -- authenticated")
print("  xor, xor-instance        -- confidentiality only")
print(LINE + "\n")
