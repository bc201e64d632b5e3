"""Named regular expressions used by format rules.

Every pattern is anchored at both ends. Rules refer to patterns by name, and the
same name is the message kind looked up in the message catalog.
"""

import re
from types import MappingProxyType
from typing import Mapping

from welfaretrack.errors import ConfigurationError


# Character ranges of the hiragana, katakana and CJK ideograph blocks
_HIRAGANA = "ぁ-ゟ"
_KATAKANA = "゠-ヿ"
_HAN = "㐀-䶿一-鿿々"
_FULLWIDTH_DIGITS = "０-９"

# =============================================================================
# Japanese text
# =============================================================================

# Hiragana, katakana, kanji, latin letters, digits, spaces, hyphen, long vowel mark
JAPANESE_NAME_PATTERN = re.compile(
    rf"\A[{_HIRAGANA}{_KATAKANA}{_HAN}a-zA-Z0-9\s\-ー]+\Z"
)

# Addresses also allow full-width digits and parentheses
JAPANESE_ADDRESS_PATTERN = re.compile(
    rf"\A[{_HIRAGANA}{_KATAKANA}{_HAN}a-zA-Z0-9{_FULLWIDTH_DIGITS}\s\-ー（）()]+\Z"
)

KATAKANA_PATTERN = re.compile(rf"\A[{_KATAKANA}ー\s]+\Z")

HIRAGANA_PATTERN = re.compile(rf"\A[{_HIRAGANA}\s]+\Z")

# =============================================================================
# Contact details
# =============================================================================

EMAIL_PATTERN = re.compile(
    r"\A[\w+\-.]+@[a-z\d\-]+(\.[a-z\d\-]+)*\.[a-z]+\Z",
    re.IGNORECASE,
)

# Hyphen separated landline, e.g. 03-1234-5678
PHONE_PATTERN = re.compile(r"\A\d{2,4}-\d{2,4}-\d{4}\Z")

MOBILE_PHONE_PATTERN = re.compile(r"\A0[789]0-\d{4}-\d{4}\Z")

POSTAL_CODE_PATTERN = re.compile(r"\A\d{3}-\d{4}\Z")

# =============================================================================
# Identifiers
# =============================================================================

ALPHANUMERIC_PATTERN = re.compile(r"\A[a-zA-Z0-9]+\Z")

USERNAME_PATTERN = re.compile(r"\A[a-zA-Z0-9\-_]+\Z")

ALPHA_PATTERN = re.compile(r"\A[a-zA-Z]+\Z")

NUMERIC_PATTERN = re.compile(r"\A\d+\Z")

# =============================================================================
# Web
# =============================================================================

URL_PATTERN = re.compile(r"\Ahttps?://[\w/:%#$&?()~.=+\-]+\Z")

DOMAIN_PATTERN = re.compile(r"\A[a-zA-Z0-9\-.]+\.[a-zA-Z]{2,}\Z")

# =============================================================================
# Finance
# =============================================================================

CREDIT_CARD_PATTERN = re.compile(r"\A\d{4}-\d{4}-\d{4}-\d{4}\Z")

BANK_ACCOUNT_PATTERN = re.compile(r"\A\d{7}\Z")

# =============================================================================
# Passwords
# =============================================================================

# Lower, upper, digit and symbol; at least 8 characters
STRONG_PASSWORD_PATTERN = re.compile(
    r"\A(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}\Z"
)

MEDIUM_PASSWORD_PATTERN = re.compile(r"\A[a-zA-Z\d]{8,}\Z")


PATTERNS: Mapping[str, re.Pattern[str]] = MappingProxyType({
    "japanese_name": JAPANESE_NAME_PATTERN,
    "japanese_address": JAPANESE_ADDRESS_PATTERN,
    "katakana": KATAKANA_PATTERN,
    "hiragana": HIRAGANA_PATTERN,
    "email": EMAIL_PATTERN,
    "phone": PHONE_PATTERN,
    "mobile_phone": MOBILE_PHONE_PATTERN,
    "postal_code": POSTAL_CODE_PATTERN,
    "alphanumeric": ALPHANUMERIC_PATTERN,
    "username": USERNAME_PATTERN,
    "alpha": ALPHA_PATTERN,
    "numeric": NUMERIC_PATTERN,
    "url": URL_PATTERN,
    "domain": DOMAIN_PATTERN,
    "credit_card": CREDIT_CARD_PATTERN,
    "bank_account": BANK_ACCOUNT_PATTERN,
    "strong_password": STRONG_PASSWORD_PATTERN,
    "medium_password": MEDIUM_PASSWORD_PATTERN,
})


def get_pattern(name: str) -> re.Pattern[str]:
    """Look up a pattern by name.

    Raises:
        ConfigurationError: If no pattern has that name
    """
    try:
        return PATTERNS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown pattern '{name}'. Available patterns: {', '.join(sorted(PATTERNS))}"
        ) from None


def matches(name: str, value: str) -> bool:
    """Check a value against a named pattern."""
    return get_pattern(name).match(value) is not None


def list_patterns() -> list[str]:
    return sorted(PATTERNS)
