# Log events / error codes
INVALID_JSON = 'INVALID_JSON'
MISSING_TARGET_URL = 'MISSING_TARGET_URL'
INVALID_EXPIRES_IN = 'INVALID_EXPIRES_IN'
CODE_UNAVAILABLE = 'CODE_UNAVAILABLE'
CODE_GENERATION_EXHAUSTED = 'CODE_GENERATION_EXHAUSTED'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
