from pathlib import Path


def page_file_name(page_id: int) -> str:
    if int(page_id) <= 0:
        raise ValueError(f"Page id must be a positive integer, got {page_id!r}")
    return f"{int(page_id)}.json"


def page_file_path(pages_dir: str | Path, page_id: int) -> Path:
    return Path(pages_dir) / page_file_name(page_id)
