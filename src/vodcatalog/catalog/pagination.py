"""Pagination arithmetic for the list endpoint."""

from __future__ import annotations

import math

from vodcatalog.models.types import Pagination


def page_offset(page: int, limit: int) -> int:
    """Row offset of a 1-based page."""
    return (page - 1) * limit


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    """Compute the pagination block for a page of ``limit`` rows out of ``total``."""
    total_pages = math.ceil(total / limit)
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        totalPages=total_pages,
        hasNext=page < total_pages,
        hasPrev=page > 1,
    )
