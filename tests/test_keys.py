"""Tests for signing key generation and unwrapping."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from cryptography.hazmat.primitives.asymmetric import ec

from easysign.crypto.codec import base64_decode, base64_encode
from easysign.crypto.packing import pack_key, unpack_key
from easysign.errors import InvalidUsageError
from easysign.keys import UnwrapRequest, generate_signing_keys, unwrap_signing_key
from easysign.types import DebugKeyPair, KeyDerivationConfig, KeyType, SigningKeyPair

# Low iteration count keeps PBKDF2 fast in tests
FAST_CONFIG = KeyDerivationConfig(iterations=1_000)


@pytest_asyncio.fixture
async def key_pair() -> SigningKeyPair:
    """Generate a key pair protected by 'pass1' (private) and 'pass2' (public)."""
    return await generate_signing_keys("pass1", "pass2", config=FAST_CONFIG)


class TestGenerateSigningKeys:
    """Tests for generate_signing_keys."""

    @pytest.mark.asyncio
    async def test_key_pair_structure(self, key_pair: SigningKeyPair) -> None:
        """Test that both halves are typed and have 16-byte IV and salt."""
        assert key_pair.private.type is KeyType.PRIVATE
        assert key_pair.public.type is KeyType.PUBLIC
        for half in (key_pair.private, key_pair.public):
            assert len(base64_decode(half.iv)) == 16
            assert len(base64_decode(half.salt)) == 16
            assert len(base64_decode(half.key)) > 0

    @pytest.mark.asyncio
    async def test_halves_use_distinct_salt_and_iv(self, key_pair: SigningKeyPair) -> None:
        """Test that each half gets its own random salt and IV."""
        assert key_pair.private.salt != key_pair.public.salt
        assert key_pair.private.iv != key_pair.public.iv

    @pytest.mark.asyncio
    async def test_pack_unpack_idempotence(self, key_pair: SigningKeyPair) -> None:
        """Test that packing then unpacking restores each half."""
        assert unpack_key(pack_key(key_pair.public)) == key_pair.public
        assert unpack_key(pack_key(key_pair.private)) == key_pair.private

    @pytest.mark.asyncio
    async def test_pem_labels(self, key_pair: SigningKeyPair) -> None:
        """Test that packed halves carry their own PEM label."""
        assert pack_key(key_pair.public).startswith("-----BEGIN PUBLIC KEY-----\n")
        assert pack_key(key_pair.private).endswith("-----END PRIVATE KEY-----\n")

    @pytest.mark.asyncio
    async def test_debug_sink_receives_raw_keys(self) -> None:
        """Test that the debug sink is given the unwrapped key objects."""
        sink = MagicMock()
        pair = await generate_signing_keys("a", "b", config=FAST_CONFIG, debug_sink=sink)

        sink.assert_called_once()
        debug = sink.call_args.args[0]
        assert isinstance(debug, DebugKeyPair)
        assert isinstance(debug.private, ec.EllipticCurvePrivateKey)
        assert isinstance(debug.private.curve, ec.SECP384R1)

        public_key = await unwrap_signing_key(pair.public, "verify", config=FAST_CONFIG).unwrap("b")
        assert public_key.public_numbers() == debug.public.public_numbers()

    @pytest.mark.asyncio
    async def test_async_debug_sink_is_awaited(self) -> None:
        """Test that a coroutine debug sink is awaited."""
        sink = AsyncMock()
        await generate_signing_keys("a", "b", config=FAST_CONFIG, debug_sink=sink)

        sink.assert_awaited_once()
        assert isinstance(sink.await_args.args[0], DebugKeyPair)

    @pytest.mark.asyncio
    async def test_generation_failure_propagates(self) -> None:
        """Test that a key-pair generation failure is not translated."""
        with patch(
            "easysign.keys.generate_key_pair",
            new=AsyncMock(side_effect=RuntimeError("no entropy")),
        ):
            with pytest.raises(RuntimeError, match="no entropy"):
                await generate_signing_keys("a", "b", config=FAST_CONFIG)


class TestUnwrapSigningKey:
    """Tests for unwrap_signing_key with real primitives."""

    @pytest.mark.asyncio
    async def test_unwrap_private_for_sign(self, key_pair: SigningKeyPair) -> None:
        """Test that the private key unwraps with its password."""
        request = unwrap_signing_key(key_pair.private, "sign", config=FAST_CONFIG)
        key = await request.unwrap("pass1")
        assert isinstance(key, ec.EllipticCurvePrivateKey)

    @pytest.mark.asyncio
    async def test_unwrap_public_for_verify(self, key_pair: SigningKeyPair) -> None:
        """Test that the public key unwraps with its password."""
        request = unwrap_signing_key(key_pair.public, "verify", config=FAST_CONFIG)
        key = await request("pass2")
        assert isinstance(key, ec.EllipticCurvePublicKey)

    @pytest.mark.asyncio
    async def test_unwrap_from_pem(self, key_pair: SigningKeyPair) -> None:
        """Test that PEM text can be unwrapped directly."""
        pem = pack_key(key_pair.private, fold=True)
        key = await unwrap_signing_key(pem, "sign", config=FAST_CONFIG).unwrap("pass1")
        assert isinstance(key, ec.EllipticCurvePrivateKey)

    @pytest.mark.asyncio
    async def test_unwrap_from_unframed_text(self, key_pair: SigningKeyPair) -> None:
        """Test that bare Base64 takes its key type from the usage."""
        body = pack_key(key_pair.public).split("\n")[1]
        request = unwrap_signing_key(body, "verify", config=FAST_CONFIG)
        assert request.key.type is KeyType.PUBLIC
        key = await request.unwrap("pass2")
        assert isinstance(key, ec.EllipticCurvePublicKey)

    @pytest.mark.asyncio
    async def test_wrong_password(self, key_pair: SigningKeyPair) -> None:
        """Test that a wrong password surfaces the primitive's error."""
        request = unwrap_signing_key(key_pair.private, "sign", config=FAST_CONFIG)
        with pytest.raises(ValueError):
            await request.unwrap("pass2")

    @pytest.mark.asyncio
    async def test_pair_halves_match(self, key_pair: SigningKeyPair) -> None:
        """Test that the unwrapped public key belongs to the unwrapped private key."""
        private_key = await unwrap_signing_key(
            key_pair.private, "sign", config=FAST_CONFIG
        ).unwrap("pass1")
        public_key = await unwrap_signing_key(
            key_pair.public, "verify", config=FAST_CONFIG
        ).unwrap("pass2")
        assert private_key.public_key().public_numbers() == public_key.public_numbers()


class TestUsageGuard:
    """Tests for usage validation, with the primitives mocked out."""

    @staticmethod
    def _wrapped(key_type: KeyType | None) -> str:
        body = base64_encode(bytes(range(32)) + b"ciphertext")
        if key_type is None:
            return body
        return f"-----BEGIN {key_type.value} KEY-----\n{body}\n-----END {key_type.value} KEY-----\n"

    def test_invalid_usage(self) -> None:
        """Test that an unknown usage is rejected and echoed."""
        with pytest.raises(InvalidUsageError, match="encrypt") as exc_info:
            unwrap_signing_key(self._wrapped(KeyType.PRIVATE), "encrypt")
        assert exc_info.value.usage == "encrypt"

    def test_sign_with_public_key(self) -> None:
        """Test that 'sign' is refused for a PUBLIC key."""
        with pytest.raises(InvalidUsageError, match="requires a PRIVATE key"):
            unwrap_signing_key(self._wrapped(KeyType.PUBLIC), "sign")

    def test_verify_with_private_key(self) -> None:
        """Test that 'verify' is refused for a PRIVATE key."""
        with pytest.raises(InvalidUsageError, match="requires a PUBLIC key"):
            unwrap_signing_key(self._wrapped(KeyType.PRIVATE), "verify")

    def test_direct_request_invalid_usage(self) -> None:
        """Test that constructing an UnwrapRequest checks the usage."""
        key = unpack_key(self._wrapped(KeyType.PRIVATE))
        with pytest.raises(InvalidUsageError, match="encrypt") as exc_info:
            UnwrapRequest(key=key, usage="encrypt")
        assert exc_info.value.usage == "encrypt"

    def test_direct_request_key_type_mismatch(self) -> None:
        """Test that constructing an UnwrapRequest checks the key type."""
        public = unpack_key(self._wrapped(KeyType.PUBLIC))
        private = unpack_key(self._wrapped(KeyType.PRIVATE))
        with pytest.raises(InvalidUsageError, match="requires a PRIVATE key"):
            UnwrapRequest(key=public, usage="sign")
        with pytest.raises(InvalidUsageError, match="requires a PUBLIC key"):
            UnwrapRequest(key=private, usage="verify")

    def test_direct_request_untyped_key(self) -> None:
        """Test that an untyped key takes its type from the usage."""
        request = UnwrapRequest(key=unpack_key(self._wrapped(None)), usage="verify")
        assert request.key.type is KeyType.PUBLIC

    def test_returns_request(self) -> None:
        """Test that setup needs no password and returns an UnwrapRequest."""
        request = unwrap_signing_key(self._wrapped(KeyType.PRIVATE), "sign")
        assert isinstance(request, UnwrapRequest)
        assert request.usage == "sign"
        assert request.config == KeyDerivationConfig()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("key_type", "usage"),
        [(KeyType.PRIVATE, "sign"), (KeyType.PUBLIC, "verify"), (None, "sign")],
    )
    async def test_unwrap_calls_primitives(self, key_type: KeyType | None, usage: str) -> None:
        """Test that unwrap derives the key from the salt and unwraps with the IV."""
        handle = object()
        derive = AsyncMock(return_value=b"k" * 32)
        unwrap = AsyncMock(return_value=handle)
        with patch("easysign.keys.derive_key", new=derive), patch(
            "easysign.keys.unwrap_key", new=unwrap
        ):
            request = unwrap_signing_key(self._wrapped(key_type), usage)
            result = await request.unwrap("secret")

        assert result is handle
        derive.assert_awaited_once_with("secret", bytes(range(16, 32)), KeyDerivationConfig())
        expected_type = KeyType.PRIVATE if usage == "sign" else KeyType.PUBLIC
        unwrap.assert_awaited_once_with(b"ciphertext", b"k" * 32, bytes(range(16)), expected_type)

    @pytest.mark.asyncio
    async def test_derive_failure_propagates(self) -> None:
        """Test that a key-derivation failure is not caught or translated."""
        with patch(
            "easysign.keys.derive_key", new=AsyncMock(side_effect=RuntimeError("kdf failed"))
        ):
            request = unwrap_signing_key(self._wrapped(KeyType.PUBLIC), "verify")
            with pytest.raises(RuntimeError, match="kdf failed"):
                await request.unwrap("secret")

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self) -> None:
        """Test that cancellation inside a primitive reaches the caller."""
        with patch("easysign.keys.derive_key", new=AsyncMock(return_value=b"k" * 32)), patch(
            "easysign.keys.unwrap_key", new=AsyncMock(side_effect=asyncio.CancelledError)
        ):
            request = unwrap_signing_key(self._wrapped(KeyType.PRIVATE), "sign")
            with pytest.raises(asyncio.CancelledError):
                await request.unwrap("secret")
