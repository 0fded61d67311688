"""Configuration module for Tycoon Engine."""

from tycoon.config.schema import Config, StarterLoan
from tycoon.config.validator import ConfigValidator

__all__ = ["Config", "ConfigValidator", "StarterLoan"]
