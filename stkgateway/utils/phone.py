DEFAULT_COUNTRY_CODE = '254'


def normalize_phone(phone, country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    """
    Normalise a phone number to the international format Daraja expects.

    Accepts: +254712345678, 0712345678, 254712345678, 712345678.
    Anything else passes through best-effort; this never raises.
    """
    p = str(phone).strip()
    if p.startswith('+'):
        p = p[1:]
    if p.startswith('0'):
        p = country_code + p[1:]
    elif len(p) == 9 and not p.startswith(country_code):
        p = country_code + p
    return p
