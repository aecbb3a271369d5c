from __future__ import annotations

from tutorhub.shared.pagination import PaginationParams, build_page


def test_page_reports_more_items_after_current_slice() -> None:
    page = build_page(["a", "b"], total=5, params=PaginationParams(limit=2, offset=2))

    assert page.has_more is True
    assert page.model_dump()["has_more"] is True


def test_last_page_has_no_more_items() -> None:
    page = build_page(["e"], total=5, params=PaginationParams(limit=2, offset=4))

    assert page.has_more is False
    assert page.limit == 2
    assert page.offset == 4


def test_default_params() -> None:
    params = PaginationParams()

    assert (params.limit, params.offset) == (20, 0)
