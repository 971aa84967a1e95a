"""Sitemap build-and-serve package."""

from src.sitemap.commands import run_clear, run_clear_async, run_generate, run_generate_async, run_serve
from src.sitemap.domain.models import BuildConfig, BuildSummary

__all__ = [
    "BuildConfig",
    "BuildSummary",
    "run_clear",
    "run_clear_async",
    "run_generate",
    "run_generate_async",
    "run_serve",
]
