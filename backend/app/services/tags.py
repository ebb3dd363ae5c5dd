from __future__ import annotations


def normalize_tags(raw: str | None) -> str | None:
    """Lowercase, trim, drop empties and duplicates, keep first-seen order.

    ``"A, a ,B,b"`` becomes ``"a,b"``. Returns ``None`` when nothing is left.
    """
    if not raw:
        return None
    tags = [item.strip().lower() for item in raw.split(",")]
    unique = list(dict.fromkeys(tag for tag in tags if tag))
    return ",".join(unique) or None


def split_tag_filter(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]
