"""
errors.py
- Error taxonomy shared by the HTTP trigger and the periodic runners.
- str() is the client-facing message; describe() is the operator log line.
"""


class ConductorError(Exception):
    status_code = 500
    message = "Internal error\n"

    def __str__(self):
        return self.message

    def describe(self):
        return f"{self.__class__.__name__}: {self.message.strip()}"


class ProcessIoError(ConductorError):
    """The external tool could not be launched, or the OS failed mid-run."""

    message = "I/O error\n"

    def __init__(self, cause):
        super().__init__(cause)
        self.cause = cause

    def describe(self):
        return f"{super().describe()} ({self.cause!r})"


class ProcessFailed(ConductorError):
    """The external tool ran and exited non-zero."""

    message = "Process failed\n"

    def __init__(self, stdout, stderr):
        super().__init__(stdout, stderr)
        self.stdout = stdout
        self.stderr = stderr

    def describe(self):
        return (
            f"{super().describe()}\n"
            f"--- stdout ---\n{self.stdout.rstrip()}\n"
            f"--- stderr ---\n{self.stderr.rstrip()}"
        )


class PullFailed(ProcessFailed):
    message = "Docker pull failed\n"


class PruneFailed(ProcessFailed):
    message = "Docker prune failed\n"


class CompositionNotFound(ConductorError):
    status_code = 404

    def __init__(self, name):
        super().__init__(name)
        self.name = name

    @property
    def message(self):
        return f"No composition found for path `{self.name}`\n"


class Unauthorized(ConductorError):
    status_code = 401
    message = "Unauthorized user attempted to access server\n"


class ConfigError(Exception):
    """Raised at startup when the configuration file cannot be used."""
