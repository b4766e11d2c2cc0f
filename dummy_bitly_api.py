# file: dummy_bitly_api.py
"""
Local stand-in for the bit.ly v2 API.

Serves /shorten, /expand, /info, /stats and /errors with bit.ly-shaped JSON
envelopes over an in-memory link table seeded with fake data. Point
BITLY_API_URL at it (http://localhost:5002) to use the CLI offline.
"""
import random
import string

from faker import Faker
from flask import Flask, jsonify, request

import config
from bitly import SHORT_URL_PREFIX

app = Flask(__name__)
fake = Faker("en_US")
Faker.seed(42)  # Reproducible data
random.seed(42)

HASH_LENGTH = 5
HASH_ALPHABET = string.ascii_letters + string.digits

ERROR_MESSAGES = {
    203: "You must be authenticated to access {method}",
    500: "Missing parameter {param}",
    1101: "Unknown hash or short URL",
    1206: "URL you tried to shorten was invalid.",
}


def generate_hash() -> str:
    """Generate an unused random hash."""
    while True:
        candidate = "".join(random.choices(HASH_ALPHABET, k=HASH_LENGTH))
        if candidate not in LINKS:
            return candidate


def generate_referrers(count: int) -> list[dict]:
    """Generate referrer-detail entries sorted by clicks, highest first."""
    referrers = [
        {
            "domain": fake.domain_name(),
            "path": "/" + fake.uri_path(),
            "clicks": random.randint(1, 500),
        }
        for _ in range(count)
    ]
    return sorted(referrers, key=lambda r: r["clicks"], reverse=True)


def create_link(long_url: str, title: str | None = None) -> dict:
    """Create and store a link record for ``long_url``."""
    link_hash = generate_hash()
    record = {
        "hash": link_hash,
        "globalHash": link_hash,
        "longUrl": long_url,
        "htmlTitle": title or "",
        "htmlMetaDescription": fake.sentence() if title else "",
        "keywords": fake.words(nb=3) if title else [],
        "contentType": "text/html; charset=utf-8",
        "thumbnail": {"small": f"http://s.bit.ly/bitly/{link_hash}/thumbnail_small.png"},
        "clicks": 0,
        "userClicks": 0,
        "referrers": [],
        "userReferrers": [],
    }
    LINKS[link_hash] = record
    URL_INDEX[long_url] = link_hash
    return record


def seed_links(count: int = 25) -> None:
    """Fill the link table with fake links and traffic."""
    for _ in range(count):
        record = create_link(fake.url() + fake.uri_path(), fake.sentence(nb_words=5))
        record["referrers"] = generate_referrers(random.randint(1, 4))
        record["userReferrers"] = record["referrers"][:1]
        record["clicks"] = sum(r["clicks"] for r in record["referrers"])
        record["userClicks"] = sum(r["clicks"] for r in record["userReferrers"])


LINKS: dict[str, dict] = {}
URL_INDEX: dict[str, str] = {}

seed_links()

INFO_FIELDS = (
    "contentType",
    "globalHash",
    "hash",
    "htmlMetaDescription",
    "htmlTitle",
    "keywords",
    "longUrl",
    "thumbnail",
)


def success(results):
    """Wrap results in a successful envelope."""
    return jsonify(
        {"errorCode": 0, "errorMessage": "", "results": results, "statusCode": "OK"}
    )


def failure(code: int, **details):
    """Build an error envelope. bit.ly reports errors with HTTP 200."""
    return jsonify(
        {
            "errorCode": code,
            "errorMessage": ERROR_MESSAGES[code].format(**details),
            "statusCode": "ERROR",
        }
    )


def authenticate(method: str):
    """Return an error response if login or apiKey is missing, else None."""
    if not request.args.get("login") or not request.args.get("apiKey"):
        return failure(203, method=method)
    return None


def requested_hash():
    """
    Resolve the shortUrl or hash parameter.

    Returns:
        Tuple of (results key, hash) or (None, None) if neither was given.
    """
    short_url = request.args.get("shortUrl")
    if short_url is not None:
        link_hash = short_url.removeprefix(SHORT_URL_PREFIX)
        return link_hash, link_hash
    link_hash = request.args.get("hash")
    return link_hash, link_hash


@app.route("/shorten", methods=["GET"])
def shorten():
    """Shorten longUrl, reusing the existing hash for a known URL."""
    denied = authenticate("shorten")
    if denied:
        return denied

    long_url = request.args.get("longUrl")
    if not long_url:
        return failure(500, param="longUrl")
    if not long_url.startswith(("http://", "https://")):
        return failure(1206)

    link_hash = URL_INDEX.get(long_url)
    record = LINKS[link_hash] if link_hash else create_link(long_url)
    return success(
        {
            long_url: {
                "hash": record["hash"],
                "shortKeywordUrl": "",
                "shortUrl": SHORT_URL_PREFIX + record["hash"],
                "userHash": record["hash"],
            }
        }
    )


@app.route("/expand", methods=["GET"])
def expand():
    """Map a short URL or hash back to its long URL."""
    denied = authenticate("expand")
    if denied:
        return denied

    key, link_hash = requested_hash()
    if key is None:
        return failure(500, param="shortUrl or hash")
    if link_hash not in LINKS:
        return failure(1101)
    return success({key: {"longUrl": LINKS[link_hash]["longUrl"]}})


@app.route("/info", methods=["GET"])
def info():
    """Return link metadata, optionally narrowed to the fields in ``keys``."""
    denied = authenticate("info")
    if denied:
        return denied

    key, link_hash = requested_hash()
    if key is None:
        return failure(500, param="shortUrl or hash")
    if link_hash not in LINKS:
        return failure(1101)

    fields = INFO_FIELDS
    if request.args.get("keys"):
        fields = [f for f in request.args["keys"].split(",") if f in INFO_FIELDS]

    record = LINKS[link_hash]
    return success({key: {field: record[field] for field in fields}})


@app.route("/stats", methods=["GET"])
def stats():
    """Return clicks and referrers for a link."""
    denied = authenticate("stats")
    if denied:
        return denied

    _key, link_hash = requested_hash()
    if link_hash is None:
        return failure(500, param="shortUrl or hash")
    if link_hash not in LINKS:
        return failure(1101)

    record = LINKS[link_hash]
    return success(
        {
            "clicks": record["clicks"],
            "hash": record["globalHash"],
            "referrers": record["referrers"],
            "userClicks": record["userClicks"],
            "userHash": record["hash"],
            "userReferrers": record["userReferrers"],
        }
    )


@app.route("/errors", methods=["GET"])
def errors():
    """List the error codes this API can return."""
    denied = authenticate("errors")
    if denied:
        return denied

    return success(
        [
            {"errorCode": code, "errorMessage": message, "statusCode": "ERROR"}
            for code, message in sorted(ERROR_MESSAGES.items())
        ]
    )


if __name__ == "__main__":
    print(f"Generated {len(LINKS)} links")
    sample = next(iter(LINKS.values()))
    print(f"Sample link: {SHORT_URL_PREFIX}{sample['hash']} -> {sample['longUrl']}")
    app.run(host="0.0.0.0", port=config.DUMMY_API_PORT, debug=True)
