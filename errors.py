class BenchmarkError(Exception):
    """Base class for failures that end a benchmark run."""


class ConnectError(BenchmarkError):
    pass


class IndexListError(BenchmarkError):
    pass


class IndexDecodeError(BenchmarkError):
    pass


class IndexCreateError(BenchmarkError):
    pass


class InsertError(BenchmarkError):
    pass


class DeleteError(BenchmarkError):
    pass


class UpdateError(BenchmarkError):
    pass


class DisconnectError(BenchmarkError):
    pass
