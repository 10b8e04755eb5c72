"""
Service context for log lines.

Identifies which process wrote a line: service name, deploy environment and pid.
"""

import os
from functools import lru_cache

from comic_collector.platform.config.core_setting import settings


@lru_cache(maxsize=1)
def get_service_context() -> str:
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    return f'{settings.SERVICE_NAME}@{deploy_env}:{os.getpid()}'
