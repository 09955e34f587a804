#!/usr/bin/env python3
"""Keytool CLI for generating and inspecting easysign keys.

Passwords are read from the environment (a .env file is honored):
EASYSIGN_PRIVATE_PASSWORD and EASYSIGN_PUBLIC_PASSWORD for ``generate``,
EASYSIGN_PASSWORD for ``check``.
"""

import asyncio
import json
import os
import sys

from dotenv import load_dotenv

from easysign import (
    KeyType,
    generate_signing_keys,
    pack_key,
    sign_message,
    unpack_key,
    unwrap_signing_key,
    verify_signature,
)


async def generate(fold: bool) -> None:
    """Generate a key pair and output both halves as PEM."""
    pair = await generate_signing_keys(
        os.environ["EASYSIGN_PRIVATE_PASSWORD"],
        os.environ["EASYSIGN_PUBLIC_PASSWORD"],
    )
    output = {
        "private": pack_key(pair.private, fold=fold),
        "public": pack_key(pair.public, fold=fold),
    }
    print(json.dumps(output))


def unpack() -> None:
    """Unpack a key from stdin and output its fields."""
    key = unpack_key(sys.stdin.read())
    output = {
        "type": key.type.value if key.type else None,
        "iv": key.iv,
        "salt": key.salt,
        "key": key.key,
    }
    print(json.dumps(output))


async def check(usage: str) -> None:
    """Unwrap a key from stdin to confirm the password opens it."""
    request = unwrap_signing_key(sys.stdin.read(), usage)
    key = await request.unwrap(os.environ["EASYSIGN_PASSWORD"])
    output = {"success": True, "type": request.key.type.value, "curve": key.curve.name}
    if request.key.type == KeyType.PRIVATE:
        # Round-trip a signature through the matching public key
        signature = sign_message(key, b"easysign keytool check")
        verify_signature(key.public_key(), b"easysign keytool check", signature)
    print(json.dumps(output))


async def main() -> None:
    """Main entry point."""
    if len(sys.argv) < 2:
        print("usage: keytool.py <command> [args]", file=sys.stderr)
        sys.exit(1)

    load_dotenv()
    command = sys.argv[1]

    if command == "generate":
        await generate(fold="--fold" in sys.argv[2:])
    elif command == "unpack":
        unpack()
    elif command == "check":
        if len(sys.argv) < 3:
            print("usage: keytool.py check <sign|verify>", file=sys.stderr)
            sys.exit(1)
        await check(sys.argv[2])
    else:
        print(f"unknown command: {command}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
