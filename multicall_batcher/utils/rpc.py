"""
RPC endpoint dialing
Builds a synchronous Web3 client for an endpoint URL
"""
import math
from urllib.parse import urlparse
from web3 import Web3, HTTPProvider, IPCProvider, LegacyWebSocketProvider

from multicall_batcher.config.settings import REQUEST_TIMEOUT
from multicall_batcher.core.exceptions import DialError
from multicall_batcher.utils.logger import get_logger

logger = get_logger(__name__)


def dial(url: str, timeout: float | None = None) -> Web3:
    """
    Create a Web3 client for an http(s), ws(s) or IPC endpoint

    No request is made here; connectivity problems surface on the first call.

    Raises:
        DialError: if the URL is empty or uses an unsupported scheme
    """
    if not url:
        raise DialError("no RPC endpoint given")

    timeout = timeout if timeout is not None else REQUEST_TIMEOUT
    scheme = urlparse(url).scheme.lower()

    try:
        if scheme in ("http", "https"):
            provider = HTTPProvider(url, request_kwargs={"timeout": timeout})
        elif scheme in ("ws", "wss"):
            provider = LegacyWebSocketProvider(url, websocket_timeout=math.ceil(timeout))
        elif scheme in ("", "file") and url.endswith(".ipc"):
            provider = IPCProvider(urlparse(url).path or url, timeout=timeout)
        else:
            raise DialError(f"unsupported RPC endpoint: {url}")
    except DialError:
        raise
    except Exception as e:
        raise DialError(f"failed to dial {url}: {e}") from e

    logger.debug(f"Dialed {scheme or 'ipc'} endpoint {url}")
    return Web3(provider)
