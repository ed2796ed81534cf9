"""Custom exceptions for gitid."""


class GitidError(Exception):
    """Base exception for gitid."""

    hint: str | None = None

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class NotFoundError(GitidError):
    """A config file, directory, repository or named profile is missing."""

    hint = "Run 'gitid init' to create a configuration, or 'gitid list' to see profiles"


class ProfileError(GitidError):
    """Profile-related errors."""

    def __init__(
        self,
        message: str,
        profile_name: str | None = None,
        details: str | None = None,
    ) -> None:
        self.profile_name = profile_name
        super().__init__(message, details=details)


class DuplicateNameError(ProfileError):
    """A profile with the same name already exists."""

    hint = "Use a different name, or remove the existing profile with 'gitid remove'"


class InvalidProfileError(ProfileError):
    """A profile failed validation."""

    hint = "Correct the field and run the command again"


class ParseError(GitidError):
    """A persisted file or a remote URL could not be understood."""

    hint = "Fix the file by hand, or move it aside and run 'gitid init'"


class NoMatchError(GitidError):
    """No profile matched the repository remote."""

    hint = "Add a matching profile with 'gitid add', or pick one with 'gitid use NAME'"


class StaleSelectionError(GitidError):
    """A selection points at a profile that no longer exists."""

    hint = "Select another profile with 'gitid use NAME', or clear it with 'gitid use --unset'"

    def __init__(self, profile_name: str, scope: str) -> None:
        self.profile_name = profile_name
        self.scope = scope
        super().__init__(
            f"The {scope} selection points at missing profile '{profile_name}'"
        )


class IOFailureError(GitidError):
    """Reading, writing or renaming a file failed."""

    hint = "Check that the file and its directory are writable"
