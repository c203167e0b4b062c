"""Security helpers: PII masking for logs and the admin password gate."""
import hmac
import re


def mask_pii(text: str) -> str:
    # Keep the last 4 digits of anything that looks like a phone number
    if not text:
        return text
    return re.sub(
        r"\+?\d[\d\s-]{6,}\d",
        lambda m: "[REDACTED]" + re.sub(r"\D", "", m.group())[-4:],
        text,
    )


def verify_admin_password(candidate: str, expected: str) -> bool:
    if not candidate or not expected:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))
