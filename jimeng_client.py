"""Signed calls to the Jimeng text-to-image endpoint of the visual API"""

import json
import logging

import httpx

from prompts import serialize_body
from sign_request import sign_v4_request
from signature_helpers import format_query

logger = logging.getLogger(__name__)

QUERY_PARAMS = {
    'Action': 'CVProcess',
    'Version': '2022-08-31',
}

# The API escapes '&' inside image URLs as \u0026
_ESCAPED_AMPERSAND = '\\u0026'


class JimengError(Exception):
    """Base class for failures of a single image request"""


class MissingCredentialsError(JimengError):
    """Access key or secret key is not configured"""


class TransportError(JimengError):
    """Request did not complete or returned a non-success status"""


class UpstreamError(JimengError):
    """Success status, but the response carries an error object"""


class ResponseParseError(JimengError):
    """Response body is not valid JSON or has an unexpected shape"""


def parse_image_response(text):
    """Parse a response body and return the first image URL

    Returns:
        Image URL, or None when the response holds no images

    Raises:
        ResponseParseError: body is not JSON, or not shaped like a response
        UpstreamError: ResponseMetadata.Error is present
    """
    cleaned = text.replace(_ESCAPED_AMPERSAND, '&')
    try:
        result = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Invalid JSON response: {e}") from e

    if not isinstance(result, dict):
        raise ResponseParseError(f"Unexpected response type: {type(result).__name__}")

    metadata = _object_field(result, 'ResponseMetadata')
    error = metadata.get('Error')
    if error:
        message = error.get('Message') if isinstance(error, dict) else None
        raise UpstreamError(f"API error: {message or 'Unknown error'}")

    image_urls = _object_field(result, 'data').get('image_urls') or []
    if not isinstance(image_urls, list):
        raise ResponseParseError(f"Unexpected image_urls type: {type(image_urls).__name__}")
    if image_urls:
        return image_urls[0]
    return None


def _object_field(result, name):
    """Return result[name] as a dict; missing or null gives an empty dict"""
    value = result.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ResponseParseError(f"Unexpected {name} type: {type(value).__name__}")
    return value


async def generate_image_url(settings, body, client=None):
    """Sign and send one image request

    Args:
        settings: Settings with credentials and endpoint configuration
        body: Request body dict (see prompts.build_request_body)
        client: Optional httpx.AsyncClient; a new one is created per call
            otherwise

    Returns:
        First image URL, or None when the API returned no image

    Raises:
        MissingCredentialsError, TransportError, UpstreamError,
        ResponseParseError
    """
    credentials = settings.credentials
    if not credentials.is_complete:
        raise MissingCredentialsError('JIMENG_ACCESS_KEY and JIMENG_SECRET_KEY are not set')

    signed = sign_v4_request(
        credentials,
        format_query(QUERY_PARAMS),
        serialize_body(body),
        config=settings.signing_config(),
    )

    logger.info("Requesting image from %s (req_key=%s)", signed.url, body.get('req_key'))
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.timeout) as own_client:
                response = await own_client.post(signed.url, headers=signed.headers, content=signed.body)
        else:
            response = await client.post(signed.url, headers=signed.headers, content=signed.body)
    except httpx.HTTPError as e:
        raise TransportError(f"Request failed: {e}") from e

    if not response.is_success:
        logger.debug("Error response body: %s", response.text)
        raise TransportError(f"HTTP error! status: {response.status_code}")

    image_url = parse_image_response(response.text)
    if image_url is None:
        logger.warning("Response contained no image URL")
    return image_url


async def check_upstream(settings, client=None):
    """Check if the API endpoint is responding"""
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=5.0) as own_client:
                response = await own_client.head(settings.endpoint)
        else:
            response = await client.head(settings.endpoint)
    except httpx.HTTPError as e:
        logger.warning("Health check of %s failed: %s", settings.endpoint, e)
        return False
    # Any answer from the host, including 4xx for an unsigned HEAD, means it is reachable
    return response.status_code < 500
