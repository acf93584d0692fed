import secrets
import string

_ALPHABET = string.ascii_uppercase + string.digits


def generate_referral_code(prefix: str, length: int = 4) -> str:
    """Return ``prefix`` followed by ``length`` random uppercase alphanumerics."""
    return prefix + ''.join(secrets.choice(_ALPHABET) for _ in range(length))
