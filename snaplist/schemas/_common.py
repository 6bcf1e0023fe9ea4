def iso(value):
    return value.isoformat() if value else None


def money(value):
    return f"{value:.2f}" if value is not None else None
