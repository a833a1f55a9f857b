class DeepCliError(Exception):
    exit_code = 1


class ValidationError(DeepCliError):
    exit_code = 2


class ConfigError(DeepCliError):
    exit_code = 3


class TransportError(DeepCliError):
    exit_code = 4


class DecodeError(DeepCliError):
    exit_code = 5
