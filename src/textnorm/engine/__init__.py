"""Normalization engine: stage transforms and the pipeline that orders them."""

from .pipeline import build_stages, normalize_and_build_maps, normalize_query

__all__ = ["build_stages", "normalize_and_build_maps", "normalize_query"]
