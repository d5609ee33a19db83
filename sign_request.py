import argparse
import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone
from urllib.parse import urlparse

from signature_helpers import (
    build_canonical_request,
    build_credential_scope,
    build_string_to_sign,
    calculate_signature,
    canonical_headers_block,
    derive_signing_key,
    format_authorization,
    format_query,
    hash_payload,
)

TIMESTAMP_FORMAT = '%Y%m%dT%H%M%SZ'


@dataclass(frozen=True)
class Credentials:
    access_key: str
    secret_key: str = field(repr=False)

    @property
    def is_complete(self):
        return bool(self.access_key) and bool(self.secret_key)


@dataclass(frozen=True)
class SigningConfig:
    """Fixed values of one deployment of the visual API"""

    endpoint: str = 'https://visual.volcengineapi.com'
    region: str = 'cn-north-1'
    service: str = 'cv'
    host: str = ''
    method: str = 'POST'
    canonical_uri: str = '/'
    content_type: str = 'application/json'
    signed_headers: str = 'content-type;host;x-content-sha256;x-date'

    def __post_init__(self):
        if not self.host:
            object.__setattr__(self, 'host', urlparse(self.endpoint).netloc)

    def with_service(self, service):
        return dataclasses.replace(self, service=service)


DEFAULT_SIGNING_CONFIG = SigningConfig()


@dataclass(frozen=True)
class SigningContext:
    timestamp: str
    date_stamp: str
    region: str
    service: str

    @property
    def credential_scope(self):
        return build_credential_scope(self.date_stamp, self.region, self.service)


@dataclass(frozen=True)
class SignedRequest:
    url: str
    headers: dict
    body: bytes


def build_signing_context(config, now=None):
    """Capture the signing time once and derive the context from it

    Args:
        config: SigningConfig supplying region and service
        now: Datetime to sign at (defaults to the current UTC time). Naive
            datetimes are taken as UTC.

    Returns:
        SigningContext
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        now = now.astimezone(timezone.utc)

    timestamp = now.replace(microsecond=0).strftime(TIMESTAMP_FORMAT)
    return SigningContext(
        timestamp=timestamp,
        date_stamp=timestamp[:8],
        region=config.region,
        service=config.service,
    )


def sign_v4_request(credentials, query, body, config=DEFAULT_SIGNING_CONFIG, now=None):
    """Sign one request to the visual API

    Args:
        credentials: Credentials to sign with
        query: Canonical query string (see format_query)
        body: Raw request body, str or bytes. The same bytes must be sent.
        config: SigningConfig of the target deployment
        now: Datetime to sign at, for reproducible signatures

    Returns:
        SignedRequest with the request URL, headers and body bytes
    """
    if isinstance(body, str):
        body = body.encode('utf-8')

    context = build_signing_context(config, now)
    payload_hash = hash_payload(body)

    headers_to_sign = {
        'content-type': config.content_type,
        'host': config.host,
        'x-content-sha256': payload_hash,
        'x-date': context.timestamp,
    }
    canonical_headers = canonical_headers_block(headers_to_sign, config.signed_headers)
    canonical_request = build_canonical_request(
        config.method,
        config.canonical_uri,
        query,
        canonical_headers,
        config.signed_headers,
        payload_hash,
    )

    credential_scope = context.credential_scope
    string_to_sign = build_string_to_sign(context.timestamp, credential_scope, canonical_request)

    signing_key = derive_signing_key(credentials.secret_key, context.date_stamp, context.region, context.service)
    signature = calculate_signature(signing_key, string_to_sign)

    headers = {
        'X-Date': context.timestamp,
        'Authorization': format_authorization(
            credentials.access_key, credential_scope, config.signed_headers, signature
        ),
        'X-Content-Sha256': payload_hash,
        'Content-Type': config.content_type,
    }

    return SignedRequest(url=f"{config.endpoint}?{query}", headers=headers, body=body)


def parse_timestamp(value):
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYYMMDDTHHMMSSZ, got {value!r}") from None


def main(argv=None):
    parser = argparse.ArgumentParser(description='Print a signed Volcengine visual API request')
    parser.add_argument('access_key', help='Access key')
    parser.add_argument('secret_key', help='Secret key')
    parser.add_argument('--body', '-b', default='', help='Raw JSON request body (default: empty)')
    parser.add_argument('--action', default='CVProcess', help='Action query parameter (default: CVProcess)')
    parser.add_argument('--version', default='2022-08-31', help='Version query parameter (default: 2022-08-31)')
    parser.add_argument('--endpoint', default=DEFAULT_SIGNING_CONFIG.endpoint, help='API endpoint')
    parser.add_argument('--region', '-r', default=DEFAULT_SIGNING_CONFIG.region, help='Region (default: cn-north-1)')
    parser.add_argument('--service', '-s', default=DEFAULT_SIGNING_CONFIG.service, help='Service (default: cv)')
    parser.add_argument('--timestamp', '-t', type=parse_timestamp,
                        help='Sign at this time (YYYYMMDDTHHMMSSZ) instead of now')

    args = parser.parse_args(argv)

    config = SigningConfig(endpoint=args.endpoint, region=args.region, service=args.service)

    signed = sign_v4_request(
        Credentials(args.access_key, args.secret_key),
        format_query({'Action': args.action, 'Version': args.version}),
        args.body,
        config=config,
        now=args.timestamp,
    )

    print(signed.url)
    for name, value in signed.headers.items():
        print(f"{name}: {value}")


if __name__ == "__main__":
    main()
