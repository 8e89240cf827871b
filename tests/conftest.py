"""Pytest configuration and fixtures."""

import datetime
import gc
import shutil
import tempfile
from collections.abc import Generator, Iterable
from pathlib import Path
from typing import Any

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.x509.oid import NameOID

from pkisig.app.ports import VerificationOutcome
from pkisig.config import Settings
from pkisig.x509.algorithms import AlgorithmRegistry


class ScriptedProvider:
    """Provider double returning a fixed outcome and recording its calls."""

    def __init__(
        self,
        digests: Iterable[str] = ("sha1", "sha256", "sha512"),
        outcome: VerificationOutcome | None = None,
    ) -> None:
        self.digests = list(digests)
        self.outcome = outcome if outcome is not None else VerificationOutcome.valid()
        self.digest_calls = 0
        self.verify_calls: list[tuple[bytes, bytes, Any, str]] = []

    def digest_names(self) -> list[str]:
        self.digest_calls += 1
        return list(self.digests)

    def verify(self, data: bytes, signature: bytes, key: Any, algorithm: str) -> VerificationOutcome:
        self.verify_calls.append((data, signature, key, algorithm))
        return self.outcome


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        gc.collect()
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def scripted_provider() -> ScriptedProvider:
    return ScriptedProvider()


@pytest.fixture
def scripted_registry(scripted_provider: ScriptedProvider) -> AlgorithmRegistry:
    return AlgorithmRegistry(scripted_provider)


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def sign_rsa(rsa_private_key: rsa.RSAPrivateKey):
    """Return a helper producing PKCS#1 v1.5 signatures with the session key."""

    def _sign(data: bytes, digest: hashes.HashAlgorithm | None = None) -> bytes:
        return rsa_private_key.sign(data, padding.PKCS1v15(), digest or hashes.SHA256())

    return _sign


def build_certificate(private_key: Any, common_name: str = "pkisig test signer") -> x509.Certificate:
    """Build a self-signed certificate for ``private_key``."""
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime.now(datetime.UTC)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .sign(private_key, hashes.SHA256())
    )


@pytest.fixture(scope="session")
def rsa_certificate(rsa_private_key: rsa.RSAPrivateKey) -> x509.Certificate:
    return build_certificate(rsa_private_key)


@pytest.fixture
def public_key_pem(rsa_private_key: rsa.RSAPrivateKey) -> bytes:
    return rsa_private_key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )


@pytest.fixture
def override_settings(temp_dir: Path) -> Generator[Settings, None, None]:
    """Provide isolated pkisig settings scoped to tests."""

    import pkisig.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    data_dir = temp_dir / "appdata"
    data_dir.mkdir(parents=True, exist_ok=True)

    settings = config_module.Settings(data_dir=data_dir)
    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings


@pytest.fixture
def isolated_algorithm_registry() -> Generator[None, None, None]:
    """Restore the process-wide algorithm registry after the test."""

    import pkisig.x509.algorithms as algorithms_module

    original = algorithms_module._registry
    try:
        yield
    finally:
        algorithms_module.set_algorithm_registry(original)


@pytest.fixture
def make_provider() -> type[ScriptedProvider]:
    """Expose the provider double class for tests needing custom outcomes."""
    return ScriptedProvider
