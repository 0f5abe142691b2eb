class ProviderError(RuntimeError):
    def __init__(self, provider: str, message: str = ""):
        self.provider = provider
        super().__init__(f"{provider}: {message}" if message else provider)


class NotConfigured(ProviderError):
    pass


class AuthenticationFailed(ProviderError):
    pass


class SearchFailed(ProviderError):
    pass


class InvalidResponse(ProviderError):
    pass
