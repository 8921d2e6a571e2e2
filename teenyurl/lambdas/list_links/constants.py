# Log events / error codes
INVALID_SORT_ORDER = 'INVALID_SORT_ORDER'
LIST_SUCCESS = 'LIST_SUCCESS'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
