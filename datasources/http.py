import threading
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

_session_local = threading.local()

DEFAULT_USER_AGENT = "LootRateViewer/1.0"
_options = {"retries": 2, "user_agent": DEFAULT_USER_AGENT}


def configure(retries: int | None = None, user_agent: str | None = None) -> None:
    """Set transport options for sessions created after this call."""
    if retries is not None:
        _options["retries"] = max(0, int(retries))
    if user_agent:
        _options["user_agent"] = user_agent


def _new_session() -> requests.Session:
    s = requests.Session()
    retries = _options["retries"]
    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        backoff_factor=0.3,
        status_forcelist=[429, 500, 502, 503, 504],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(pool_connections=20, pool_maxsize=50, max_retries=retry)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    s.headers.update({
        "User-Agent": _options["user_agent"],
        "Accept": "text/html,text/plain,*/*",
        "Accept-Encoding": "gzip, deflate",
        "Connection": "keep-alive",
    })
    return s


def get_shared_session() -> requests.Session:
    """Return this thread's session, creating it on first use."""
    s = getattr(_session_local, "session", None)
    if s is None:
        s = _new_session()
        _session_local.session = s
    return s
