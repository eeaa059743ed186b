"""
Configuration for Peptide Calculator
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Application configuration"""

    # Local store for saved configurations and the last calculator state
    DATABASE_URL = os.getenv("DATABASE_URL")

    # If no DATABASE_URL is set, fall back to a local SQLite file
    if not DATABASE_URL:
        DATABASE_URL = "sqlite:///peptide_calculator.db"

    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")

    # Calculator defaults
    DEFAULT_PEPTIDE = os.getenv("DEFAULT_PEPTIDE", "tirzepatide")
    DEFAULT_SYRINGE = os.getenv("DEFAULT_SYRINGE", "1.0")

    # Application settings
    DEBUG = os.getenv("DEBUG", "False").lower() == "true"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def print_config(cls):
        """Print current configuration (hiding sensitive data)"""
        print("\n" + "="*60)
        print("PEPTIDE CALCULATOR CONFIGURATION")
        print("="*60)
        print(f"Database: {cls.DATABASE_URL}")
        print(f"Default peptide: {cls.DEFAULT_PEPTIDE}")
        print(f"Default syringe: {cls.DEFAULT_SYRINGE} ml")
        print(f"Secret key: {'Configured' if os.getenv('SECRET_KEY') else 'Development default'}")
        print(f"Debug mode: {cls.DEBUG}")
        print(f"Log level: {cls.LOG_LEVEL}")
        print("="*60 + "\n")


if __name__ == "__main__":
    Config.print_config()
