"""Error hierarchy for the mailweaver pipeline."""

from __future__ import annotations


class MailweaverError(Exception):
    """Base error for all mailweaver errors."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


# ---------------------------------------------------------------------------
# Non-fatal errors: isolated at the selector, stylesheet or block
# ---------------------------------------------------------------------------


class ModuleLoadError(MailweaverError):
    """A block capability module could not be located or imported."""

    def __init__(self, message: str, *, block_name: str = "", cause: Exception | None = None) -> None:
        super().__init__(message, cause=cause)
        self.block_name = block_name


class ModuleContractError(ModuleLoadError):
    """A block capability module does not expose a ``decorate`` function."""


class FetchError(MailweaverError):
    """A stylesheet could not be fetched."""

    def __init__(
        self,
        message: str,
        *,
        path: str = "",
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.path = path
        self.status_code = status_code


class ParseError(MailweaverError):
    """A selector or declaration could not be parsed."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        *,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.line = line
        self.column = column


class DecorationError(MailweaverError):
    """A block's decorate function raised."""

    def __init__(self, message: str, *, block_name: str = "", cause: Exception | None = None) -> None:
        super().__init__(message, cause=cause)
        self.block_name = block_name


# ---------------------------------------------------------------------------
# Fatal errors: no document can be produced
# ---------------------------------------------------------------------------


class ServiceUnavailableError(MailweaverError):
    """The CSS syntax service or the renderer is not available."""

    def __init__(self, message: str, *, service: str = "", cause: Exception | None = None) -> None:
        super().__init__(message, cause=cause)
        self.service = service


class RenderError(MailweaverError):
    """The renderer failed to turn the MJML document into output."""

    def __init__(self, message: str, *, exit_code: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


FATAL_ERRORS: tuple[type[MailweaverError], ...] = (ServiceUnavailableError, RenderError)
