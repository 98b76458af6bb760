"""Error taxonomy for newswall.

Provider-side failures derive from ProviderError. Only ProviderErrors are
folded into fallback steps; anything else is a bug and propagates.
"""

from __future__ import annotations


class NewswallError(Exception):
    """Base class for all newswall errors."""


class ConfigError(NewswallError):
    """Raised when image.config.json is missing or invalid."""


class PipelineError(NewswallError):
    """Raised when a pipeline stage produces nothing to work with (no headlines, no keywords)."""


class WallpaperError(NewswallError):
    """Raised when the desktop background could not be applied."""


class ProviderError(NewswallError):
    """Base class for failures of a remote provider or endpoint."""

    # Set by the orchestrator on its final error: the generation failure that preceded it
    generation_error: ProviderError | None = None


class MissingCredential(ProviderError):
    """Raised before any network call when a provider's API key is empty."""


class MissingModel(ProviderError):
    """Raised before any network call when a provider's model identifier is empty."""


class ProviderTransportError(ProviderError):
    """Raised when the HTTP request itself failed (connect error, timeout, ...)."""


class ProviderHTTPError(ProviderError):
    """Raised on a non-success HTTP status from a remote endpoint."""

    def __init__(self, status: int, body: str, endpoint: str = "") -> None:
        self.status = status
        self.body = body
        self.endpoint = endpoint
        where = f" from {endpoint}" if endpoint else ""
        super().__init__(f"HTTP {status}{where}: {body[:300]}")


class ProviderResponseError(ProviderError):
    """Raised when a success response lacks the expected content."""


class MissingImageData(ProviderResponseError):
    """Image-synthesis response had no base64 image data at any known location."""


class MissingInlineData(ProviderResponseError):
    """Content-generation response had no part carrying inline image data."""


class NoSourcesConfigured(ProviderError):
    """Raised when a fallback sequence is run with no candidates."""


class AggregatedFailure(ProviderError):
    """Every candidate in an ordered fallback sequence failed.

    Keeps every underlying cause, in trial order, together with the label of
    the candidate that produced it.
    """

    def __init__(self, message: str, causes: list[tuple[str, ProviderError]]) -> None:
        self.labels = [label for label, _ in causes]
        self.causes: list[ProviderError] = [err for _, err in causes]
        details = " | ".join(f"{label}: {err}" for label, err in causes)
        super().__init__(f"{message}: {details}" if details else message)

    @property
    def primary(self) -> ProviderError:
        """Cause from the first candidate tried."""
        return self.causes[0]

    @property
    def fallback(self) -> ProviderError | None:
        """Cause from the last candidate tried (None when only one was tried)."""
        if len(self.causes) < 2:
            return None
        return self.causes[-1]
