#!/usr/bin/env python3
"""
Configuration Management for Cargo Intake

Handles environment-based configuration with defaults and validation.
Supports multiple environments (development, test, production).
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .money import Money
from .rules import DEFAULT_RULES, IntakeRules

# Load environment variables from .env file
load_dotenv()


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class IntakeConfig:
    """Packing-list intake and pricing settings."""

    unit_price: Money
    parse_batch_size: int = 50
    rules_file: Path | None = None
    operator: str = "system"


@dataclass
class Config:
    """
    Main configuration class for the intake application.

    Loads configuration from environment variables with defaults
    and validation for each environment type.
    """

    environment: Environment

    # Core directories
    data_dir: Path
    shipments_dir: Path
    output_dir: Path

    intake: IntakeConfig

    # Application settings
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("CARGO_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_cargo_intake"
            base_dir = Path(os.getenv("CARGO_DATA_DIR", str(default_test_dir)))
        else:
            base_dir = Path(os.getenv("CARGO_DATA_DIR", "./data")).expanduser().resolve()

        data_dir = base_dir
        shipments_dir = data_dir / "shipments"
        output_dir = data_dir / "staging"

        for directory in [data_dir, shipments_dir, output_dir]:
            directory.mkdir(parents=True, exist_ok=True)

        rules_file = os.getenv("CARGO_RULES_FILE")

        intake = IntakeConfig(
            unit_price=_parse_money(os.getenv("CARGO_UNIT_PRICE", "100")),
            parse_batch_size=int(os.getenv("CARGO_PARSE_BATCH_SIZE", "50")),
            rules_file=Path(rules_file).expanduser() if rules_file else None,
            operator=os.getenv("CARGO_OPERATOR", "system"),
        )

        return cls(
            environment=env,
            data_dir=data_dir,
            shipments_dir=shipments_dir,
            output_dir=output_dir,
            intake=intake,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        for name, path in [
            ("data_dir", self.data_dir),
            ("shipments_dir", self.shipments_dir),
            ("output_dir", self.output_dir),
        ]:
            if not path.exists():
                errors.append(f"{name} does not exist: {path}")

        if self.intake.unit_price.to_cents() < 0:
            errors.append("CARGO_UNIT_PRICE must be non-negative")
        if self.intake.parse_batch_size <= 0:
            errors.append("CARGO_PARSE_BATCH_SIZE must be positive")
        if self.intake.rules_file is not None and not self.intake.rules_file.exists():
            errors.append(f"CARGO_RULES_FILE does not exist: {self.intake.rules_file}")

        return errors

    def load_rules(self) -> IntakeRules:
        """Load intake rules from the configured YAML file, or the defaults."""
        if self.intake.rules_file is None:
            return DEFAULT_RULES
        return IntakeRules.from_yaml(self.intake.rules_file)

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a JSON-friendly dictionary."""
        return {
            "environment": self.environment.value,
            "data_dir": str(self.data_dir),
            "shipments_dir": str(self.shipments_dir),
            "output_dir": str(self.output_dir),
            "intake": {
                "unit_price": str(self.intake.unit_price),
                "parse_batch_size": self.intake.parse_batch_size,
                "rules_file": str(self.intake.rules_file) if self.intake.rules_file else None,
                "operator": self.intake.operator,
            },
            "debug": self.debug,
            "log_level": self.log_level,
        }


def _parse_money(value: str) -> Money:
    """Parse a dollar amount from the environment, rejecting junk."""
    try:
        return Money.from_dollars(value)
    except ValueError as e:
        raise ValueError(f"Invalid dollar amount in configuration: {value!r}") from e


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_environment()

        errors = _config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        _config.setup_logging()

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()
