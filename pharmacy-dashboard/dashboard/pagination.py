"""
pagination.py
=============
Fixed-size page slicing with a remembered current page.
"""

import math
import os
from typing import List, Optional, Sequence, TypeVar

PAGE_SIZE = int(os.getenv("DASHBOARD_PAGE_SIZE", "10"))

T = TypeVar("T")


class Paginator:
    """
    One per bucket. The current page is not clamped when the item count
    shrinks; a page past the end is simply empty.
    """

    def __init__(self, page_size: int = PAGE_SIZE):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        self.page = 1

    def go_to(self, page: int):
        if page < 1:
            raise ValueError(f"Page numbers start at 1, got {page}")
        self.page = page

    def total_pages(self, items: Sequence[T]) -> int:
        return math.ceil(len(items) / self.page_size)

    def slice(self, items: Sequence[T], page: Optional[int] = None) -> List[T]:
        page = self.page if page is None else page
        if page < 1:
            raise ValueError(f"Page numbers start at 1, got {page}")
        last = page * self.page_size
        return list(items[last - self.page_size:last])
