def parse_page_params(
    page_str: str | None,
    page_size_str: str | None,
    default_page_size: int,
    max_page_size: int,
) -> tuple[int, int]:
    """
    Parse page / page_size query parameters.

    - page: optional, default 1, must be >= 1
    - page_size: optional, default `default_page_size`, must be 1..max_page_size

    Raises ValueError on anything else (non-integers included).
    """
    page = 1
    page_size = default_page_size

    if page_str is not None and page_str != "":
        page = int(page_str)
    if page_size_str is not None and page_size_str != "":
        page_size = int(page_size_str)

    if page < 1:
        raise ValueError("page must be >= 1")
    if not 1 <= page_size <= max_page_size:
        raise ValueError(f"page_size must be between 1 and {max_page_size}")

    return page, page_size
