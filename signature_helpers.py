"""Helper functions for Volcengine HMAC-SHA256 request signing shared between sign_request.py and jimeng_client.py"""

import hashlib
import hmac

ALGORITHM = 'HMAC-SHA256'

# Terminal element of the credential scope and last step of the key chain
SCOPE_TERMINATOR = 'request'


def format_query(parameters):
    """Build the canonical query string

    Keys are sorted ascending regardless of the order they were supplied in.
    Values are used as given; no URL encoding is applied.

    Args:
        parameters: Mapping of query parameter name to value

    Returns:
        `key=value` pairs joined with `&`
    """
    return '&'.join(f"{key}={parameters[key]}" for key in sorted(parameters))


def hash_payload(body):
    """Lowercase hex SHA-256 of the request body (str is encoded as UTF-8)"""
    if isinstance(body, str):
        body = body.encode('utf-8')
    return hashlib.sha256(body).hexdigest()


def canonical_headers_block(headers, signed_headers):
    """Build the canonical headers block

    Args:
        headers: Mapping of header name to value
        signed_headers: Semicolon-separated lowercase header names

    Returns:
        One `name:value` line per signed header, each newline-terminated,
        in the order of signed_headers
    """
    lower_headers = {name.lower(): value for name, value in headers.items()}
    return ''.join(
        f"{name}:{lower_headers[name]}\n" for name in signed_headers.split(';')
    )


def build_canonical_request(method, canonical_uri, canonical_querystring, canonical_headers, signed_headers,
                            payload_hash):
    """Join the canonical request components with newlines"""
    return '\n'.join([
        method,
        canonical_uri,
        canonical_querystring,
        canonical_headers,
        signed_headers,
        payload_hash,
    ])


def build_credential_scope(datestamp, region, service):
    return f"{datestamp}/{region}/{service}/{SCOPE_TERMINATOR}"


def build_string_to_sign(timestamp, credential_scope, canonical_request):
    """Build the string to sign

    Args:
        timestamp: Timestamp in YYYYMMDDTHHMMSSZ format
        credential_scope: Credential scope string
        canonical_request: Canonical request string

    Returns:
        Algorithm, timestamp, scope and hex SHA-256 of the canonical request,
        newline-joined
    """
    return '\n'.join([
        ALGORITHM,
        timestamp,
        credential_scope,
        hashlib.sha256(canonical_request.encode('utf-8')).hexdigest(),
    ])


def _sign(key, msg):
    return hmac.new(key, msg.encode('utf-8'), hashlib.sha256).digest()


def derive_signing_key(secret_key, datestamp, region, service):
    """Derive the per-request signing key

    Args:
        secret_key: Secret access key
        datestamp: Date in YYYYMMDD format
        region: Region name
        service: Service name

    Returns:
        kSigning bytes
    """
    kDate = _sign(secret_key.encode('utf-8'), datestamp)
    kRegion = _sign(kDate, region)
    kService = _sign(kRegion, service)
    kSigning = _sign(kService, SCOPE_TERMINATOR)
    return kSigning


def calculate_signature(signing_key, string_to_sign):
    """Hex-encoded HMAC-SHA256 of the string to sign"""
    return hmac.new(signing_key, string_to_sign.encode('utf-8'), hashlib.sha256).hexdigest()


def format_authorization(access_key, credential_scope, signed_headers, signature):
    return (
        f"{ALGORITHM} Credential={access_key}/{credential_scope}, "
        f"SignedHeaders={signed_headers}, Signature={signature}"
    )
