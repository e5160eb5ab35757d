class CloudbotError(Exception):
    exit_code = 1

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class UsageError(CloudbotError):
    exit_code = 2

    def __init__(self, path: str, usage: str) -> None:
        super().__init__(f"usage: {path} {usage}".rstrip())
        self.path = path
        self.usage = usage


class UnknownCommand(CloudbotError):
    exit_code = 2

    def __init__(self, token: str) -> None:
        super().__init__(f"unknown command: {token}")
        self.token = token


class MissingConfig(CloudbotError):
    exit_code = 3

    def __init__(self, key: str) -> None:
        super().__init__(f"missing configuration value: {key}")
        self.key = key


class MessageTooLong(CloudbotError):
    exit_code = 4

    def __init__(self, length: int, limit: int) -> None:
        super().__init__(f"Must be {limit} bytes or less (currently {length})")
        self.length = length
        self.limit = limit


class CollaboratorError(CloudbotError):
    exit_code = 5


class NoTokenError(CollaboratorError):
    pass


class InvalidTokenError(CollaboratorError):
    pass


class DuplicateCommandError(ValueError):
    pass
