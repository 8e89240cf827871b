"""Application bootstrap wiring the provider, registry, and services."""

from __future__ import annotations

from dataclasses import dataclass

from pkisig.app.ports import CryptoProviderPort
from pkisig.app.verification_service import VerificationService
from pkisig.config import Settings, get_settings
from pkisig.x509.algorithms import AlgorithmRegistry, get_algorithm_registry


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    provider: CryptoProviderPort
    algorithm_registry: AlgorithmRegistry
    verification_service: VerificationService


def bootstrap_application(
    settings: Settings | None = None,
    *,
    algorithm_registry: AlgorithmRegistry | None = None,
) -> ApplicationContainer:
    """Create the application container for CLI consumption."""

    active_settings = settings if settings is not None else get_settings()
    registry = algorithm_registry if algorithm_registry is not None else get_algorithm_registry()

    verification_service = VerificationService(
        registry=registry,
        default_algorithm=active_settings.default_algorithm,
        default_encoding=active_settings.signature_encoding,
    )

    return ApplicationContainer(
        settings=active_settings,
        provider=registry.provider,
        algorithm_registry=registry,
        verification_service=verification_service,
    )
