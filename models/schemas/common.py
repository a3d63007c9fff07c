from datetime import date

from marshmallow import ValidationError


def normalize_isbn(raw: str) -> str:
    if raw is None:
        raise ValidationError("ISBN is required.")
    value = raw.strip()
    if not value:
        raise ValidationError("ISBN is required.")
    return value


def normalize_label_set(values) -> list:
    """Trim, drop blanks, collapse duplicates; order is not significant."""
    seen = set()
    out = []
    for v in values or []:
        v = v.strip()
        if v and v not in seen:
            seen.add(v)
            out.append(v)
    return sorted(out)


def today_iso() -> str:
    return date.today().isoformat()


def flatten_messages(messages, prefix: str = "") -> list:
    """Turn marshmallow's nested error dict into 'field: message' strings."""
    if isinstance(messages, dict):
        out = []
        for key, value in messages.items():
            name = f"{prefix}.{key}" if prefix else str(key)
            out.extend(flatten_messages(value, name))
        return out
    if isinstance(messages, (list, tuple)):
        out = []
        for m in messages:
            out.extend(flatten_messages(m, prefix))
        return out
    return [f"{prefix}: {messages}" if prefix else str(messages)]
