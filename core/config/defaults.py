# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for ledger access, minting, scans, pinning
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for ledger access and orchestration policy.
These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from core.errors import ConfigurationError

# Most plots one batch mint transaction may carry
MAX_MINT_CHUNK_SIZE = 50


@dataclass(frozen=True)
class LedgerDefaults:
    """
    Defaults for reaching the ledger.

    No confirmation timeout lives here: a slow confirmation keeps the
    calling operation suspended until the caller cancels it.
    """
    rpc_url: str = "http://127.0.0.1:8545"
    contract_address: str = ""

    # Receipt polling while waiting for confirmation (seconds)
    receipt_poll_interval: float = 1.0

    @classmethod
    def from_env(cls) -> "LedgerDefaults":
        """Create from environment variables."""
        return cls(
            rpc_url=os.getenv("LEDGER_RPC_URL", "http://127.0.0.1:8545"),
            contract_address=os.getenv("LEDGER_CONTRACT_ADDRESS", ""),
            receipt_poll_interval=float(os.getenv("LEDGER_RECEIPT_POLL_SECONDS", 1.0)),
        )


@dataclass(frozen=True)
class MintDefaults:
    """
    Defaults for multi-plot minting.

    chunk_size is the most plots one batch transaction may carry, between
    1 and MAX_MINT_CHUNK_SIZE.
    """
    chunk_size: int = MAX_MINT_CHUNK_SIZE
    sequential_interval_seconds: float = 1.0  # Legacy one-by-one fallback

    def __post_init__(self):
        if not 1 <= self.chunk_size <= MAX_MINT_CHUNK_SIZE:
            raise ConfigurationError(
                f"Mint chunk size must be between 1 and {MAX_MINT_CHUNK_SIZE}, "
                f"got {self.chunk_size}"
            )
        if self.sequential_interval_seconds < 0:
            raise ConfigurationError(
                f"Sequential mint interval must be >= 0, got {self.sequential_interval_seconds}"
            )

    def chunks(self, count: int) -> list:
        """Split a request into consecutive chunk sizes (50, 50, 20 for 120)."""
        if count <= 0:
            return []
        full, rest = divmod(count, self.chunk_size)
        sizes = [self.chunk_size] * full
        if rest:
            sizes.append(rest)
        return sizes

    @classmethod
    def from_env(cls) -> "MintDefaults":
        """Create from environment variables."""
        return cls(
            chunk_size=int(os.getenv("MINT_CHUNK_SIZE", MAX_MINT_CHUNK_SIZE)),
            sequential_interval_seconds=float(
                os.getenv("MINT_SEQUENTIAL_INTERVAL_SECONDS", 1.0)
            ),
        )


@dataclass(frozen=True)
class ScanDefaults:
    """
    Defaults for read fan-out.

    Reads for independent entities run concurrently, bounded by
    max_concurrent_reads. skip_warning_ratio is the share of skipped reads
    that triggers a warning on a best-effort scan.
    """
    max_concurrent_reads: int = 16
    skip_warning_ratio: float = 0.1

    @classmethod
    def from_env(cls) -> "ScanDefaults":
        """Create from environment variables."""
        return cls(
            max_concurrent_reads=int(os.getenv("SCAN_MAX_CONCURRENT_READS", 16)),
            skip_warning_ratio=float(os.getenv("SCAN_SKIP_WARNING_RATIO", 0.1)),
        )


@dataclass(frozen=True)
class PinningDefaults:
    """
    Defaults for the off-chain image store (IPFS pinning service).

    API key + secret are preferred over the JWT when both are set.
    """
    api_url: str = "https://api.pinata.cloud/pinning/pinFileToIPFS"
    gateway_url: str = "https://gateway.pinata.cloud/ipfs"
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    jwt: Optional[str] = None

    # Upload validation
    max_image_bytes: int = 10 * 1024 * 1024  # 10 MB
    allowed_image_types: tuple = (
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
    )

    request_timeout_seconds: float = 60.0

    @property
    def has_credentials(self) -> bool:
        return bool(self.jwt or (self.api_key and self.api_secret))

    @classmethod
    def from_env(cls) -> "PinningDefaults":
        """Create from environment variables."""
        return cls(
            api_url=os.getenv(
                "PINATA_API_URL", "https://api.pinata.cloud/pinning/pinFileToIPFS"
            ),
            gateway_url=os.getenv("PINATA_GATEWAY_URL", "https://gateway.pinata.cloud/ipfs"),
            api_key=os.getenv("PINATA_API_KEY") or None,
            api_secret=os.getenv("PINATA_API_SECRET") or None,
            jwt=os.getenv("PINATA_JWT") or None,
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    ledger: LedgerDefaults = field(default_factory=LedgerDefaults)
    mint: MintDefaults = field(default_factory=MintDefaults)
    scan: ScanDefaults = field(default_factory=ScanDefaults)
    pinning: PinningDefaults = field(default_factory=PinningDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            ledger=LedgerDefaults.from_env(),
            mint=MintDefaults.from_env(),
            scan=ScanDefaults.from_env(),
            pinning=PinningDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "LedgerDefaults",
    "MAX_MINT_CHUNK_SIZE",
    "MintDefaults",
    "ScanDefaults",
    "PinningDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
