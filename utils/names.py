from typing import Optional


def join_full_name(first_name: Optional[str], middle_name: Optional[str], last_name: Optional[str]) -> str:
    """Space-join first, middle (if non-blank) and last name; missing parts are skipped."""
    parts = (first_name, middle_name, last_name)
    return " ".join(p.strip() for p in parts if p is not None and p.strip())
