from teenyurl.utils.config import app_env, app_name, project_root, app_prefix, load_config
from teenyurl.utils.helpers import now_ms, base_url, get_short_url, format_expiration, require_environment, guarantee_500_response
from teenyurl.utils.shortener import generate_shortcode
from teenyurl.utils.validation import is_valid_url, normalize_url, is_valid_custom_code, is_valid_domain, normalize_domain
from teenyurl.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'is_valid_url',
    'normalize_url',
    'is_valid_custom_code',
    'is_valid_domain',
    'normalize_domain',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'now_ms',
    'base_url',
    'get_short_url',
    'format_expiration',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
