from typing import Callable, Optional
import time

import requests

from common.logging import log

DEFAULT_RETRIES = 2
DEFAULT_INITIAL_DELAY = 1.0


class FetchError(Exception):
    """Base class for failures raised by the fetch layer."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class HttpError(FetchError):
    """The server answered with a non-2xx status."""

    def __init__(self, message: str, status: int, url: Optional[str] = None):
        super().__init__(message, url=url)
        self.status = status

    @property
    def retryable(self) -> bool:
        return not 400 <= self.status < 500


class NetworkError(FetchError):
    """Transport failure or a body that could not be decoded."""


def http_get(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    log_name: Optional[str] = None,
    retries: int = DEFAULT_RETRIES,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs,
):
    """
    Issue an HTTP GET request with retries and consistent logging.

    4xx responses raise HttpError immediately. 5xx responses and
    transport errors are retried with exponential backoff
    (initial_delay * 2**attempt) for `retries + 1` attempts in total.
    """
    return _with_retries(
        url,
        lambda response: response,
        session=session,
        log_name=log_name,
        retries=retries,
        initial_delay=initial_delay,
        sleep=sleep,
        **kwargs,
    )


def http_get_json(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    log_name: Optional[str] = None,
    retries: int = DEFAULT_RETRIES,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs,
):
    """
    Like http_get but returns the decoded JSON body. A body that fails to
    decode counts as a retryable failure.
    """
    return _with_retries(
        url,
        _decode_json,
        session=session,
        log_name=log_name,
        retries=retries,
        initial_delay=initial_delay,
        sleep=sleep,
        **kwargs,
    )


def _with_retries(url, handle, *, session, log_name, retries, initial_delay, sleep, **kwargs):
    client = session or requests.Session()
    attempts = max(0, retries) + 1
    last_error: Optional[FetchError] = None

    for attempt in range(attempts):
        try:
            response = client.get(url, **kwargs)
            final_url = getattr(response, "url", None) or url
            if response.status_code >= 400:
                raise HttpError(
                    f"API Error ({response.status_code}) from {final_url}: {_error_message(response)}",
                    status=response.status_code,
                    url=final_url,
                )
            return handle(response)
        except HttpError as exc:
            if not exc.retryable:
                log("ERROR", f"Non-retryable error: {exc}", log_name)
                raise
            last_error = exc
        except requests.RequestException as exc:
            last_error = NetworkError(str(exc), url=_resolve_request_url(exc, url))
        except NetworkError as exc:
            last_error = exc

        if attempt + 1 < attempts:
            delay = initial_delay * (2 ** attempt)
            log(
                "WARN",
                f"Attempt {attempt + 1}/{attempts} failed for {url}: {last_error}. "
                f"Retrying in {delay:g}s...",
                log_name,
            )
            sleep(delay)

    message = f"Failed to fetch data from {url} after {attempts} attempts. Last error: {last_error}"
    log("ERROR", message, log_name)
    if isinstance(last_error, HttpError):
        raise HttpError(message, status=last_error.status, url=url) from last_error
    raise NetworkError(message, url=url) from last_error


def _decode_json(response):
    text = getattr(response, "text", None)
    if isinstance(text, str) and not text.strip():
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise NetworkError(
            f"Invalid JSON body from {getattr(response, 'url', None)}: {exc}"
        ) from exc


def _error_message(response) -> str:
    reason = getattr(response, "reason", None) or "Unknown error"
    try:
        payload = response.json()
    except ValueError:
        return reason
    if isinstance(payload, dict):
        error = payload.get("error")
        if payload.get("message"):
            return str(payload["message"])
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return reason


def _resolve_request_url(exc: requests.RequestException, fallback: str) -> str:
    request = getattr(exc, "request", None)
    if request is not None:
        return getattr(request, "url", fallback) or fallback
    return fallback
