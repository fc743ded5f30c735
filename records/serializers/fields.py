import bleach


def clean_text(value):
    """Strip markup from free text; blank input becomes ``None``."""
    if value is None:
        return None
    value = bleach.clean(str(value).strip(), tags=set(), strip=True)
    return value or None
