class TeenyURLError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:teenyurl_error'


class LinkValidationError(TeenyURLError):
    """Base exception for rejected link creation input."""

    error_code = 'link:validation_error'


class InvalidURLError(LinkValidationError):
    """Raised when the destination URL does not parse as an absolute URL."""

    error_code = 'link:invalid_url'


class InvalidCodeError(LinkValidationError):
    """Raised when a custom shortcode contains characters outside [A-Za-z0-9_-]."""

    error_code = 'link:invalid_code'


class InvalidDomainError(LinkValidationError):
    """Raised when a custom domain is not a valid hostname."""

    error_code = 'link:invalid_domain'


class CodeUnavailableError(TeenyURLError):
    """Raised when a custom shortcode is already claimed by another link."""

    error_code = 'link:code_unavailable'


class CodeGenerationExhaustedError(TeenyURLError):
    """Raised when every shortcode generation attempt collided."""

    error_code = 'link:code_generation_exhausted'


class ConfigurationError(TeenyURLError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
