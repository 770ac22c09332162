"""
Configuration settings for Ledgerly Data Interchange.
Centralized configuration management for the application.
"""

import os
from decimal import Decimal
from pathlib import Path
from typing import Optional

class Config:
    """Application configuration class."""

    # Application Settings
    APP_NAME = "Ledgerly Data Interchange"
    REPORT_BRAND = os.getenv("REPORT_BRAND", "Ledgerly")
    VERSION = "1.0.0"

    # File Upload Settings
    MAX_FILE_SIZE_MB: int = int(os.getenv("MAX_FILE_SIZE_MB", "10"))
    MAX_FILE_SIZE_BYTES: int = MAX_FILE_SIZE_MB * 1024 * 1024
    ALLOWED_FILE_TYPES: list[str] = [".csv", ".json", ".pdf"]

    # Output Settings
    LOG_DIR: Path = Path(os.getenv("LOG_DIR", "./logs"))

    # Validation Settings
    ALLOW_ZERO_AMOUNTS: bool = os.getenv("ALLOW_ZERO_AMOUNTS", "false").lower() == "true"

    # Record Defaults
    DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "USD")
    DEFAULT_CATEGORY: str = "Other"
    DEFAULT_GOAL_CATEGORY: str = "Savings"
    MAX_DESCRIPTION_LENGTH: int = 100
    MAX_BUDGET_CATEGORY_LENGTH: int = 50

    # PDF Recovery Settings
    GOAL_BLOCK_MAX_LINES: int = int(os.getenv("GOAL_BLOCK_MAX_LINES", "10"))
    GOAL_PLACEHOLDER_TARGET: Decimal = Decimal(os.getenv("GOAL_PLACEHOLDER_TARGET", "1000.00"))
    GOAL_DEFAULT_DEADLINE_MONTHS: int = 6

    # PDF Report Settings
    PDF_MAX_TRANSACTION_ROWS: int = int(os.getenv("PDF_MAX_TRANSACTION_ROWS", "50"))
    PDF_MONTHS_IN_COMPARISON: int = 6

    # Logging Settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    # API Settings
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))

    # Frontend Settings
    FRONTEND_HOST: str = os.getenv("FRONTEND_HOST", "0.0.0.0")
    FRONTEND_PORT: int = int(os.getenv("FRONTEND_PORT", "8501"))

    @classmethod
    def ensure_directories(cls):
        """Ensure required directories exist."""
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)

    @classmethod
    def get_log_path(cls, filename: str) -> Path:
        """Get full path for log file."""
        cls.ensure_directories()
        return cls.LOG_DIR / filename

    @classmethod
    def validate_file(cls, filename: str, file_size: int) -> tuple[bool, Optional[str]]:
        """
        Validate an uploaded import file.

        Returns:
            tuple: (is_valid, error_message)
        """
        # Check file type
        if not filename or not any(filename.lower().endswith(ext) for ext in cls.ALLOWED_FILE_TYPES):
            return False, f"Invalid file type. Allowed types: {', '.join(cls.ALLOWED_FILE_TYPES)}"

        # Check file size
        if file_size > cls.MAX_FILE_SIZE_BYTES:
            size_mb = file_size / (1024 * 1024)
            return False, f"File too large ({size_mb:.2f} MB). Maximum: {cls.MAX_FILE_SIZE_MB} MB"

        # Check if empty
        if file_size == 0:
            return False, "File is empty"

        return True, None

    @classmethod
    def to_dict(cls) -> dict:
        """Convert configuration to dictionary."""
        return {
            "app_name": cls.APP_NAME,
            "version": cls.VERSION,
            "max_file_size_mb": cls.MAX_FILE_SIZE_MB,
            "allowed_file_types": cls.ALLOWED_FILE_TYPES,
            "log_dir": str(cls.LOG_DIR),
            "allow_zero_amounts": cls.ALLOW_ZERO_AMOUNTS,
            "default_currency": cls.DEFAULT_CURRENCY,
            "pdf_max_transaction_rows": cls.PDF_MAX_TRANSACTION_ROWS,
            "log_level": cls.LOG_LEVEL,
        }


# Create a singleton instance
config = Config()
