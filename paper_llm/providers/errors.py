"""
LLM error taxonomy.

Every error raised by the provider layer derives from LLMError and carries a
short human-readable ``user_message``. Cancellation is not an error; see
``StreamState.CANCELLED``.
"""
from typing import Optional


class LLMError(Exception):
    """Base class for provider-layer failures."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail

    @property
    def user_message(self) -> str:
        return str(self)


class InvalidURLError(LLMError):
    """The base URL or endpoint could not be parsed. Raised before any network call."""

    def __init__(self, url: str):
        super().__init__(f"The LLM provider base URL is invalid: {url!r}")
        self.url = url

    @property
    def user_message(self) -> str:
        return "LLM 服务 URL 无效，请在设置中检查"


class BadResponseError(LLMError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: Optional[str] = None):
        super().__init__(f"LLM service returned an unexpected status code: {status_code}", detail)
        self.status_code = status_code

    @property
    def is_auth_error(self) -> bool:
        return self.status_code in (401, 403)

    @property
    def user_message(self) -> str:
        if self.is_auth_error:
            return "API Key 无效，请在设置中检查"
        return f"LLM 服务错误 (HTTP {self.status_code})"


class InvalidResponseError(LLMError):
    """A 2xx response whose body did not match the expected shape."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__("The LLM service response could not be decoded.", detail)

    @property
    def user_message(self) -> str:
        return "LLM 响应格式异常"


class MissingCredentialError(LLMError):
    """No usable credential exists for the provider's credential reference."""

    def __init__(self, ref: str):
        super().__init__(f"No API key configured for credential reference {ref!r}")
        self.ref = ref

    @property
    def user_message(self) -> str:
        return "API Key 未配置，请在设置中添加"


class NetworkError(LLMError):
    """The transport failed before a response was received."""

    @property
    def user_message(self) -> str:
        return f"网络连接失败: {self}"


class UnsupportedProviderError(LLMError):
    """No adapter is registered for the provider type."""

    @property
    def user_message(self) -> str:
        return "该服务商暂不支持，请在设置中检查 LLM 配置"


class LLMNotConfiguredError(LLMError):
    """No enabled model/provider could be resolved for the request."""

    def __init__(self, message: str = "No LLM model is configured"):
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return "请先在设置中配置 LLM 服务"


def describe_error(error: BaseException) -> str:
    """Translate any exception into a short human-readable string."""
    if isinstance(error, LLMError):
        return error.user_message
    message = str(error).strip()
    return f"生成失败: {message}" if message else f"生成失败: {error.__class__.__name__}"
