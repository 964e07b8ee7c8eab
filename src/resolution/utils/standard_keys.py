IPFS_HTML = "ipfs.html.value"
IPFS_REDIRECT_DOMAIN = "ipfs.redirect_domain.value"
WHOIS_EMAIL = "whois.email.value"
GUNDB_USERNAME = "gundb.username.value"
GUNDB_PUBLIC_KEY = "gundb.public_key.value"
TWITTER_USERNAME = "social.twitter.username"
VALIDATION_TWITTER_USERNAME = "validation.social.twitter.username"

METADATA_KEYS = (
    IPFS_HTML,
    IPFS_REDIRECT_DOMAIN,
    WHOIS_EMAIL,
    GUNDB_USERNAME,
    GUNDB_PUBLIC_KEY,
    TWITTER_USERNAME,
    VALIDATION_TWITTER_USERNAME,
)

# Currencies read by a full resolve() on record based registries
RESOLVED_TICKERS = ("BTC", "ETH", "ZIL", "LTC", "BCH", "ADA", "XRP", "EOS", "XLM", "DOGE")


def crypto_address_key(currency_ticker: str) -> str:
    return f"crypto.{currency_ticker.upper()}.address"


def ticker_from_key(key: str) -> str | None:
    """``crypto.ETH.address`` -> ``ETH``; None for any other key"""
    parts = key.split(".")
    if len(parts) == 3 and parts[0] == "crypto" and parts[2] == "address":
        return parts[1]
    return None
