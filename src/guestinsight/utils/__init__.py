"""Utility modules for GuestInsight."""

from .data_prep import export_to_json, load_reviews, prepare_export

__all__ = [
    "export_to_json",
    "load_reviews",
    "prepare_export",
]
