class SolCliError(Exception):
    """Base for every error that ends a command with a message and exit code 1."""


class ConfigError(SolCliError):
    pass


class MissingApiKeyError(ConfigError):
    pass


class KeypairError(SolCliError):
    pass


class InvalidAddressError(SolCliError):
    pass


class InvalidAmountError(SolCliError):
    pass


class RpcError(SolCliError):
    pass


class RpcHttpError(RpcError):
    pass


class RpcResponseError(RpcError):
    """JSON-RPC error object returned by the node."""

    def __init__(self, method: str, code: int | None, message: str) -> None:
        self.method = method
        self.code = code
        self.message = message
        super().__init__(f"{method} failed ({code}): {message}")


class AccountNotFoundError(SolCliError):
    pass


class AccountDecodeError(SolCliError):
    pass


class TransactionError(SolCliError):
    pass


class HeliusError(SolCliError):
    pass
