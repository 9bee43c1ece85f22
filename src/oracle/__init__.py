"""
Token Oracle

Aggregates spot, DEX and ranking data for one ticker or contract address
and folds it into a composite confidence, an outlook and a six-month
market-cap projection.
"""

__version__ = "0.1.0"

# Import packages to trigger source/narrative registration
from oracle import narrative, sources

# Public API
from oracle.config.settings import Settings, get_settings
from oracle.core.errors import InputError, InternalError, NotFoundError, OracleError
from oracle.core.types import OracleReport, TokenIdentity
from oracle.pipeline import OracleService
from oracle.resolver import TokenResolver, is_contract_address
from oracle.sources import build_sources, source_registry

__all__ = [
    # Version
    "__version__",
    # Config
    "get_settings",
    "Settings",
    # Types
    "OracleReport",
    "TokenIdentity",
    # Errors
    "OracleError",
    "InputError",
    "NotFoundError",
    "InternalError",
    # Pipeline
    "OracleService",
    "TokenResolver",
    "is_contract_address",
    # Sources
    "build_sources",
    "source_registry",
]


def main() -> None:
    """Main entry point - runs the CLI."""
    from oracle.cli import cli
    cli()


if __name__ == "__main__":
    main()
