"""Identity provider and session cookie settings."""

from cloudstack.settings.components import config

# One-time code lifetime in seconds
IDENTITY_OTP_TTL = config('IDENTITY_OTP_TTL', cast=int, default=900)

# Wrong codes allowed before the code is revoked
IDENTITY_OTP_MAX_ATTEMPTS = config(
    'IDENTITY_OTP_MAX_ATTEMPTS',
    cast=int,
    default=5,
)

# Provider session lifetime in seconds (one year)
IDENTITY_SESSION_TTL = config(
    'IDENTITY_SESSION_TTL',
    cast=int,
    default=365 * 24 * 60 * 60,
)

# Cookie carrying the provider session secret
SESSION_TOKEN_COOKIE_NAME = config(
    'SESSION_TOKEN_COOKIE_NAME',
    default='appwrite-session',
)
SESSION_TOKEN_COOKIE_SECURE = config(
    'SESSION_TOKEN_COOKIE_SECURE',
    cast=bool,
    default=True,
)

AVATAR_PLACEHOLDER_URL = config(
    'AVATAR_PLACEHOLDER_URL',
    default=(
        'https://img.freepik.com/free-psd/'
        '3d-illustration-person-with-sunglasses_23-2149436188.jpg'
    ),
)
