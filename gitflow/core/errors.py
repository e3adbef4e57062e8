"""Error codes for CLI exit status.

Every workflow failure maps onto one of these codes so that scripts driving
the CLI can tell a refused precondition from a broken configuration, a failed
git command or an unreachable hosting provider.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (dirty working tree, already on base branch, bad input)
    - 2: Configuration error (invalid strategy, bump, tag prefix, provider)
    - 3: Provider error (hosting API unreachable or rejected the request)
    - 4: Git error (a git subcommand failed, e.g. rebase conflict)
    """

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    PROVIDER_ERROR = 3
    GIT_ERROR = 4

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        """Check if this code indicates success."""
        return self == ErrorCode.OK
