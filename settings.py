"""Environment-based configuration"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from sign_request import DEFAULT_SIGNING_CONFIG, Credentials, SigningConfig

logger = logging.getLogger(__name__)

ACCESS_KEY_VAR = 'JIMENG_ACCESS_KEY'
SECRET_KEY_VAR = 'JIMENG_SECRET_KEY'


class ConfigError(ValueError):
    """Raised when an environment variable has an unusable value"""


@dataclass(frozen=True)
class Settings:
    access_key: str = ''
    secret_key: str = field(default='', repr=False)
    endpoint: str = DEFAULT_SIGNING_CONFIG.endpoint
    region: str = DEFAULT_SIGNING_CONFIG.region
    service: str = DEFAULT_SIGNING_CONFIG.service
    timeout: float = 60.0
    host: str = '0.0.0.0'
    port: int = 8000
    log_level: str = 'INFO'

    @property
    def credentials(self):
        return Credentials(self.access_key, self.secret_key)

    def signing_config(self):
        return SigningConfig(endpoint=self.endpoint, region=self.region, service=self.service)


def _number(environ, name, default, cast):
    raw = environ.get(name)
    if raw is None or raw == '':
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def load_settings(environ=None):
    """Load settings from the environment

    When environ is None, a .env file in the working directory is loaded
    into os.environ first. Missing credentials are allowed so the server can
    start; tool calls then report the configuration error.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    settings = Settings(
        access_key=environ.get(ACCESS_KEY_VAR, ''),
        secret_key=environ.get(SECRET_KEY_VAR, ''),
        endpoint=environ.get('JIMENG_ENDPOINT') or DEFAULT_SIGNING_CONFIG.endpoint,
        region=environ.get('JIMENG_REGION') or DEFAULT_SIGNING_CONFIG.region,
        service=environ.get('JIMENG_SERVICE') or DEFAULT_SIGNING_CONFIG.service,
        timeout=_number(environ, 'JIMENG_TIMEOUT', 60.0, float),
        host=environ.get('HOST') or '0.0.0.0',
        port=_number(environ, 'PORT', 8000, int),
        log_level=(environ.get('LOG_LEVEL') or 'INFO').upper(),
    )

    if not settings.credentials.is_complete:
        logger.warning(
            "%s and %s are not set; the server will start but image generation is unavailable",
            ACCESS_KEY_VAR, SECRET_KEY_VAR,
        )
    return settings
