"""Application configuration from AWS AppConfig

One AppConfig *Application* (`APP_NAME`) holds an *Environment* per `APP_ENV`.
The deployed `backend-config` profile is a JSON document naming the active data
store backend and each lambda's settings for every backend:

    {
        "build": 12,
        "active_backend": "redis",
        "configs": {
            "shorten_url": {
                "redis": {"host": "...", "port": 6379, "db": 0},
                "memory": {}
            },
            "redirect_url": {"redis": {"url": "redis://..."}},
            "list_links": {"redis": { ... }},
            "purge_expired": {"redis": { ... }}
        }
    }

`load_config(lambda_name)` narrows the document to `{active_backend: settings}`,
which is exactly what `teenyurl.dao.link_dao_from_config()` accepts:

    >>> cfg = load_config('shorten_url')
    >>> cfg
    {'redis': {'host': '...', 'port': 6379, 'db': 0}}

Under `sam local` with APPCONFIG_AGENT_URL set, the document is read from the
local AppConfig agent container instead of the AppConfig Data API.
"""

import os
import json
import logging
import urllib.parse
import urllib.request
from pathlib import Path

import boto3

from teenyurl.types import LambdaConfiguration
from teenyurl.constants import ENV, Backend
from teenyurl.exceptions import BadConfigurationError
from teenyurl.utils.helpers import require_environment
from teenyurl.utils.runtime import running_locally


logger = logging.getLogger(__name__)

DEFAULT_PROFILE_NAME = 'backend-config'
AGENT_HOSTS = frozenset({'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'})
AGENT_PORT = 2772
AGENT_TIMEOUT = 5


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.path.dirname(__file__)))


def app_prefix() -> str | None:
    """Key namespace for DAOs, `<app name>:<app env>`; None without APP_NAME"""
    name = app_name()
    return None if name is None else f'{name}:{app_env()}'


def _validate_appconfig_agent_url(url: str | None) -> str:
    """Accept only local agent endpoints; '' when unset"""
    if not url:
        return ''
    parts = urllib.parse.urlparse(url)
    if parts.scheme not in {'http', 'https'}:
        raise BadConfigurationError(f'Bad scheme {url}')
    if parts.hostname not in AGENT_HOSTS:
        raise BadConfigurationError(f'Bad host {url}')
    if parts.port not in {AGENT_PORT, None}:
        raise BadConfigurationError(f'Bad port {url}')
    return url


def _fetch_from_agent(agent_url: str) -> dict:
    profile = os.getenv(ENV.AppConfig.PROFILE_NAME, DEFAULT_PROFILE_NAME)
    url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile}'

    logger.debug('Loading AppConfig from local agent.', extra={'agentUrl': url})
    with urllib.request.urlopen(url, timeout=AGENT_TIMEOUT) as response:  # noqa: S310
        return json.load(response)


@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def _fetch_from_appconfig() -> dict:
    """Pull the deployed document through an AppConfig Data session

    Raises:
        MissingEnvironmentVariableError: if an AppConfig identifier is unset.
        botocore.exceptions.ClientError: if AppConfig rejects the request.
    """
    logger.debug('Loading AppConfig from AWS AppConfig.')
    client = boto3.client('appconfigdata')
    session = client.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )
    response = client.get_latest_configuration(ConfigurationToken=session['InitialConfigurationToken'])
    return json.loads(response['Configuration'].read().decode('utf-8'))


def _select_lambda_config(document: dict, lambda_name: str) -> LambdaConfiguration:
    backend = document.get('active_backend')
    if backend not in set(Backend):
        raise BadConfigurationError(f"Unknown active_backend {backend!r}, expected one of: {', '.join(Backend)}")

    configs = document.get('configs') or {}
    if lambda_name not in configs:
        raise BadConfigurationError(f'No configuration section for lambda {lambda_name!r}')

    return {backend: (configs[lambda_name] or {}).get(backend) or {}}


def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load the active backend's settings for one lambda

    Args:
        lambda_name (str): section name, e.g. 'shorten_url' or 'redirect_url'.

    Returns:
        dict: {<active backend>: <backend settings>}

    Raises:
        MissingEnvironmentVariableError: AppConfig identifiers are missing.
        BadConfigurationError: the agent URL or the document is malformed.
        botocore.exceptions.ClientError: AppConfig rejects the request.
    """
    agent_url = _validate_appconfig_agent_url(os.getenv(ENV.AppConfig.AGENT_URL))
    if running_locally() and agent_url:
        document = _fetch_from_agent(agent_url)
    else:
        document = _fetch_from_appconfig()

    logger.debug('Loaded AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return _select_lambda_config(document, lambda_name)
