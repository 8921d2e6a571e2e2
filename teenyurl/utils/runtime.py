"""Where the handlers are executing

`sam local invoke` sets AWS_SAM_LOCAL=true; developer setups set APP_ENV=local.
Either one switches config loading to the local AppConfig agent and lets
`guarantee_500_response` re-raise instead of masking tracebacks.
"""

import os

from teenyurl.constants import ENV


def running_locally() -> bool:
    if os.getenv(ENV.App.APP_ENV, '').strip().lower() == 'local':
        return True
    return os.getenv(ENV.App.AWS_SAM_LOCAL, '').strip().lower() == 'true'
