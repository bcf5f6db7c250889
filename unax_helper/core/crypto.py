"""Passphrase-keyed symmetric string encryption.

Output is byte-compatible with PHP's
``openssl_encrypt($data, $algo, $passphrase, 0, substr($passphrase, 0, $ivlen))``:
the key is the passphrase NUL-padded or truncated to the key length, the IV is
the first ``iv_length`` bytes of the passphrase NUL-padded to size, and the
ciphertext is base64 text.

Known weakness: the IV is derived from the passphrase alone, so it is the same
on every call for a given (algorithm, passphrase) pair. Encryption is therefore
deterministic and, for CTR/CFB/OFB/ChaCha20, reuses keystream across messages.
Existing ciphertexts depend on this scheme, so it is kept as is. Do not use it
for new data that needs confidentiality against an attacker who can see
several ciphertexts.
"""

from __future__ import annotations

import base64
import binascii
import threading
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable

from cryptography.hazmat.decrepit.ciphers.modes import CFB, CFB8, OFB
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from unax_helper.core.logging import get_logger
from unax_helper.domain.enums import CipherErrorKind

if TYPE_CHECKING:
    from unax_helper.core.config import Settings
    from unax_helper.core.keystore import PassphraseStore

logger = get_logger(__name__)

AES_BLOCK_BITS = 128


@dataclass(frozen=True, slots=True)
class CipherSpec:
    name: str
    key_length: int
    iv_length: int
    build: Callable[[bytes, bytes], Cipher]
    block_padding: bool = False


def _aes_specs() -> list[CipherSpec]:
    mode_table: list[tuple[str, Callable[[bytes], modes.Mode], int, bool]] = [
        ("ctr", modes.CTR, 16, False),
        ("cbc", modes.CBC, 16, True),
        ("cfb", CFB, 16, False),
        ("cfb8", CFB8, 16, False),
        ("ofb", OFB, 16, False),
        ("ecb", lambda _iv: modes.ECB(), 0, True),
    ]
    specs = []
    for bits in (128, 192, 256):
        for suffix, mode, iv_length, block_padding in mode_table:
            specs.append(
                CipherSpec(
                    name=f"aes-{bits}-{suffix}",
                    key_length=bits // 8,
                    iv_length=iv_length,
                    build=lambda key, iv, mode=mode: Cipher(algorithms.AES(key), mode(iv)),
                    block_padding=block_padding,
                )
            )
    return specs


CIPHER_SPECS: dict[str, CipherSpec] = {spec.name: spec for spec in _aes_specs()}
CIPHER_SPECS["chacha20"] = CipherSpec(
    name="chacha20",
    key_length=32,
    iv_length=16,
    build=lambda key, iv: Cipher(algorithms.ChaCha20(key, iv), mode=None),
)


def supported_algorithms() -> list[str]:
    return sorted(CIPHER_SPECS)


def iv_length(algorithm: str) -> int:
    return CIPHER_SPECS[algorithm].iv_length


def _fit(material: bytes, size: int) -> bytes:
    return material[:size].ljust(size, b"\0")


@dataclass(frozen=True, slots=True)
class CipherConfig:
    algorithm: str = "aes-256-ctr"
    passphrase: str = "passphrase"

    def with_algorithm(self, algorithm: str) -> "CipherConfig":
        return replace(self, algorithm=algorithm)

    def with_passphrase(self, passphrase: str) -> "CipherConfig":
        return replace(self, passphrase=passphrase)


@dataclass(frozen=True, slots=True)
class CipherResult:
    value: str | None = None
    error: CipherErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def failure(cls, error: CipherErrorKind) -> "CipherResult":
        return cls(value=None, error=error)


class SymmetricCipher:
    def __init__(self, config: CipherConfig | None = None) -> None:
        self._config = config or CipherConfig()
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, store: PassphraseStore | None = None) -> "SymmetricCipher":
        from unax_helper.core.keystore import PassphraseStore

        store = store or PassphraseStore(settings=settings)
        return cls(CipherConfig(algorithm=settings.cipher_algo, passphrase=store.load()))

    @property
    def config(self) -> CipherConfig:
        with self._lock:
            return self._config

    @property
    def algorithm(self) -> str:
        return self.config.algorithm

    @property
    def passphrase(self) -> str:
        return self.config.passphrase

    def set_algorithm(self, algorithm: str) -> None:
        with self._lock:
            self._config = self._config.with_algorithm(algorithm)

    def set_passphrase(self, passphrase: str) -> None:
        with self._lock:
            self._config = self._config.with_passphrase(passphrase)

    def _prepare(self, data: str) -> tuple[CipherSpec, bytes, bytes] | CipherResult:
        config = self.config
        if not data:
            return CipherResult.failure(CipherErrorKind.EMPTY_INPUT)
        spec = CIPHER_SPECS.get(config.algorithm)
        if spec is None:
            logger.warning("Unsupported cipher algorithm %r", config.algorithm)
            return CipherResult.failure(CipherErrorKind.UNSUPPORTED_ALGORITHM)
        secret = config.passphrase.encode("utf-8")
        return spec, _fit(secret, spec.key_length), _fit(secret, spec.iv_length)

    def encrypt(self, plaintext: str) -> CipherResult:
        prepared = self._prepare(plaintext)
        if isinstance(prepared, CipherResult):
            return prepared
        spec, key, iv = prepared

        payload = plaintext.encode("utf-8")
        if spec.block_padding:
            padder = padding.PKCS7(AES_BLOCK_BITS).padder()
            payload = padder.update(payload) + padder.finalize()
        encryptor = spec.build(key, iv).encryptor()
        raw = encryptor.update(payload) + encryptor.finalize()
        return CipherResult(value=base64.b64encode(raw).decode("ascii"))

    def decrypt(self, ciphertext: str) -> CipherResult:
        prepared = self._prepare(ciphertext)
        if isinstance(prepared, CipherResult):
            return prepared
        spec, key, iv = prepared

        try:
            raw = base64.b64decode(ciphertext.encode("ascii"), validate=True)
            decryptor = spec.build(key, iv).decryptor()
            payload = decryptor.update(raw) + decryptor.finalize()
            if spec.block_padding:
                unpadder = padding.PKCS7(AES_BLOCK_BITS).unpadder()
                payload = unpadder.update(payload) + unpadder.finalize()
            return CipherResult(value=payload.decode("utf-8"))
        except (binascii.Error, UnicodeError, ValueError) as exc:
            logger.warning("Decryption with %s failed (%s)", spec.name, type(exc).__name__)
            return CipherResult.failure(CipherErrorKind.DECRYPT_FAILED)
