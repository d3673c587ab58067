def error_message(exc: BaseException, default: str) -> str:
    """
    Turn a failed request into one line for the alert banner.

    Prefers the server's ``message`` field, then the backend's ``error``
    envelope, then the action-specific default. Failures without a
    response (connection refused, timeout) always get the default.
    """
    response = getattr(exc, "response", None)
    if response is None:
        return default
    try:
        payload = response.json()
    except ValueError:
        return default
    if isinstance(payload, dict):
        for key in ("message", "error"):
            value = payload.get(key)
            if value:
                return str(value)
    return default
