#!/usr/bin/env python3
"""
Configuration management for the storefront backend.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class Config:
    """Configuration class for the application."""

    # Gemini (Google) API Configuration for the AI chef / chat assistant
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    GEMINI_TEXT_MODEL = os.getenv("GEMINI_TEXT_MODEL", "gemini-3-flash-preview")
    GEMINI_IMAGE_MODEL = os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")
    GEMINI_API_BASE = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")

    # Admin dashboard gate (replace with the auth provider for production)
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "samyra2024")

    # Local fallback store (file|redis|memory); files go under the working directory, never the installed package
    LOCAL_STORE_BACKEND = os.getenv("LOCAL_STORE_BACKEND", "file").lower()
    LOCAL_STORE_DIR = os.getenv("LOCAL_STORE_DIR", os.path.join(os.getcwd(), "storefront_data"))

    # Redis Configuration
    REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))
    REDIS_DB = int(os.getenv("REDIS_DB", 0))

    # Remote storage bucket shared by order reference images and product photos
    STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "order-images")

    REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", 30))
    MAX_IMAGE_BYTES = 5 * 1024 * 1024

    @classmethod
    def debug_print(cls):
        backend = BackendConfig.from_env()
        print(f"[CONFIG] REMOTE_BACKEND={'configured' if backend.is_remote_configured() else 'local fallback'}")
        print(f"[CONFIG] LOCAL_STORE_BACKEND={cls.LOCAL_STORE_BACKEND} dir={cls.LOCAL_STORE_DIR}")
        print(f"[CONFIG] GEMINI_TEXT_MODEL={cls.GEMINI_TEXT_MODEL} image={cls.GEMINI_IMAGE_MODEL} set={bool(cls.GEMINI_API_KEY)}")

    @classmethod
    def validate(cls):
        """Validate that all required configuration is present."""
        problems = []

        if cls.LOCAL_STORE_BACKEND not in ("file", "redis", "memory"):
            problems.append(f"LOCAL_STORE_BACKEND={cls.LOCAL_STORE_BACKEND!r}")
        if not cls.ADMIN_PASSWORD:
            problems.append("ADMIN_PASSWORD")

        if problems:
            raise ValueError(f"Invalid configuration: {', '.join(problems)}")

        return True


@dataclass
class BackendConfig:
    """Connection parameters of the hosted backend.

    Services hold one of these (or build one from the environment on every
    call) and ask it which persistence path to take, so changing either value
    takes effect on the next operation.
    """

    url: str = ""
    key: str = ""
    bucket: str = "order-images"

    @classmethod
    def from_env(cls) -> "BackendConfig":
        return cls(
            url=os.getenv("SUPABASE_URL", "").strip(),
            key=os.getenv("SUPABASE_ANON_KEY", "").strip(),
            bucket=os.getenv("STORAGE_BUCKET", Config.STORAGE_BUCKET),
        )

    def is_remote_configured(self) -> bool:
        return bool(self.url and self.key)


# Validate configuration on import
Config.validate()
