import os

PORT = int(os.environ.get("PORT", 1337))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FILE = os.environ.get("LOG_FILE")

REQUEST_TIMEOUT = 15
SECONDARY_TIMEOUT = 10
DEFAULT_CHARSET = "utf-8"

# IE11 identity for the scanned site
USER_AGENT = "Mozilla/5.0 (Windows NT 6.3; Trident/7.0; rv:11.0) like Gecko"
DEFAULT_HEADERS = {
    "Accept": "text/html, application/xhtml+xml, */*",
    "Accept-Encoding": "gzip, deflate",
    "Accept-Language": "en-US,en;q=0.5",
    "User-Agent": USER_AGENT,
}

# Compatibility View list
COMPAT_LIST_URLS = (
    "https://iecvlist.microsoft.com/IE11/1379465767093/iecompatviewlist.xml",
)
COMPAT_LIST_REFRESH_SECONDS = 60 * 60

# W3C Nu validator
W3C_VALIDATOR_URL = "https://validator.w3.org/nu/"
W3C_VALIDATOR_TIMEOUT = 15

# Kraken image compression
KRAKEN_ENDPOINT = "https://api.kraken.io/modernie"
KRAKEN_KEY = os.environ.get("KRAKEN_KEY", "")
KRAKEN_SECRET = os.environ.get("KRAKEN_SECRET", "")
IMAGE_COMPRESSION_TIMEOUT = 30
IMAGE_COMPRESSION_MIN_SAVINGS = 5000

MARKUP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
