"""
Client context for log lines.

Identifies which client build and process produced a log line, so logs
collected from several devices or test workers can be told apart.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    client_name = os.getenv('CLIENT_NAME', 'checkout-client')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # pytest-xdist worker id when running tests in parallel, else the process id
    instance_id = os.getenv('PYTEST_XDIST_WORKER') or str(os.getpid())

    return f'{client_name}@{deploy_env}:{instance_id}'
