from delphixci.messages import unable_to_connect


class DelphixEngineError(Exception):
    """The engine (or the step using it) reported a failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UndefinedOperationError(DelphixEngineError):
    pass


class EngineConnectionError(Exception):
    def __init__(self, address: str) -> None:
        super().__init__(unable_to_connect(address))
        self.address = address
        self.message = unable_to_connect(address)


class DctApiError(Exception):
    """DCT answered with an error status, or with something we can't parse (status_code is None then)."""

    def __init__(self, status_code: None | int, body: str) -> None:
        message = (
            f"DCT request failed with HTTP {status_code}: {body}"
            if status_code is not None
            else f"DCT sent an unexpected response: {body}"
        )
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.message = message
