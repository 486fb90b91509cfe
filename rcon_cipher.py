# XOR framing for HLL RCON v2.
# The server sends its key as the very first message of a connection; every
# byte exchanged afterwards, in both directions, is XOR'd with that key.

from typing import Iterable

# Size of every read, the key exchange included. Longer replies are truncated.
MSGLEN = 8196


def xor_crypt(data: bytes, key: bytes) -> bytes:
    if not key:
        raise ValueError("XOR key must not be empty")
    return bytes([b ^ key[i % len(key)] for i, b in enumerate(data)])


def command_line(*tokens: str) -> str:
    return " ".join(tokens)


def encode_command(tokens: Iterable[str], key: bytes) -> bytes:
    return xor_crypt(command_line(*tokens).encode(), key)


def decode_response(data: bytes, key: bytes) -> str:
    return xor_crypt(data, key).decode(errors="ignore")
