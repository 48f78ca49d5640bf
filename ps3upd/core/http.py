import logging

import requests
from requests.adapters import HTTPAdapter
import urllib3

from .config import AppConfig

logger = logging.getLogger(__name__)

def make_session(config: AppConfig) -> requests.Session:
    # No retries: a failed request surfaces to the caller as-is
    adapter = HTTPAdapter(max_retries=0, pool_connections=4, pool_maxsize=4)
    s = requests.Session()
    s.mount("http://", adapter); s.mount("https://", adapter)
    s.headers.update({"User-Agent": config.user_agent})
    s.verify = config.verify_tls
    if not config.verify_tls:
        # Only silenced when the user runs with verification off
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        logger.debug("TLS certificate verification disabled")
    return s
