"""Errors raised by the Plaid client.

Callers catch :class:`ProviderError` to handle any aggregator failure, or a
subclass to tell re-link situations (auth) apart from transient ones.
"""


class ProviderError(Exception):
    """Any failure talking to the aggregator.

    Attributes:
        provider_name: Aggregator that failed (always ``"Plaid"`` today).
        error_code: Plaid ``error_code`` from the response body, when known.
    """

    def __init__(self, message: str, provider_name: str = "Plaid", error_code: str | None = None):
        super().__init__(message)
        self.provider_name = provider_name
        self.error_code = error_code

    @property
    def retriable(self) -> bool:
        return False


class ProviderAuthError(ProviderError):
    """Bad API keys or an Item that needs the user to re-link (401/403, ITEM_LOGIN_REQUIRED)."""


class ProviderConnectionError(ProviderError):
    """The request never got an HTTP answer (timeout, DNS, refused)."""

    def __init__(self, message: str, provider_name: str = "Plaid", retriable: bool = True):
        super().__init__(message, provider_name)
        self._retriable = retriable

    @property
    def retriable(self) -> bool:
        return self._retriable


class ProviderAPIError(ProviderError):
    """Plaid answered with an HTTP error status."""

    def __init__(
        self,
        message: str,
        provider_name: str = "Plaid",
        status_code: int | None = None,
        error_code: str | None = None,
    ):
        super().__init__(message, provider_name, error_code)
        self.status_code = status_code

    @property
    def retriable(self) -> bool:
        """Rate limits (429) and server errors (5xx)."""
        return self.status_code is not None and (self.status_code == 429 or self.status_code >= 500)


class ProviderDataError(ProviderError):
    """A response arrived but could not be understood."""
