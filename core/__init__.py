"""Astro audit core - domain, application, infrastructure and settings."""
