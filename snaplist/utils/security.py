from urllib.parse import urlparse

from ..exceptions import ValidationError

ALLOWED_SCHEMES = ("http", "https")

# Domains that may not be used as QR destinations
BAD_DOMAINS: list[str] = []


def normalize_destination_url(url: str | None) -> str:
    """
    Validate a QR destination and return it with a scheme.

    Bare hosts get ``https://``; non-web schemes (javascript:, data:, ...)
    and blocked domains raise ValidationError.
    """
    url = (url or "").strip()
    if not url:
        raise ValidationError("destinationUrl is required", field="destinationUrl")

    parsed = urlparse(url)
    if not parsed.scheme or (parsed.scheme not in ALLOWED_SCHEMES and not parsed.netloc and "." in parsed.scheme):
        url = "https://" + url
        parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES or not parsed.netloc:
        raise ValidationError("destinationUrl must be an http(s) URL", field="destinationUrl")

    domain = parsed.hostname or ""
    for bad_domain in BAD_DOMAINS:
        if domain == bad_domain or domain.endswith("." + bad_domain):
            raise ValidationError(f"Domain '{domain}' is blocked.", field="destinationUrl")

    return url
