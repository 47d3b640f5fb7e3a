"""File loaders for internship lists, profiles and applications."""

from src.io.records import load_applied_ids, load_filter_settings, load_internships, load_profile

__all__ = ["load_applied_ids", "load_filter_settings", "load_internships", "load_profile"]
