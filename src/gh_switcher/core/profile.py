# =============================================================================
# Identity Profile Model
# =============================================================================
# A git identity: the user.name / user.email pair applied with
# `git config --global` when switching to an account.
#
# Profiles come from three places:
#   - Discovered in git config files (regenerated on every scan)
#   - Added manually by the user (persisted)
#   - Assigned to an account (persisted per account)
# =============================================================================

from dataclasses import dataclass

# Shown when a profile has neither a name nor an email
EMPTY_DISPLAY = "—"


@dataclass(frozen=True)
class IdentityProfile:
    """
    A name/email pair for git commits.

    Two profiles are equal when both fields are equal. Lists of profiles
    are ordered by `display_string`, compared case-insensitively.

    Attributes:
        name: Value for git's user.name (may be empty).
        email: Value for git's user.email (may be empty).
    """

    name: str = ""
    email: str = ""

    @classmethod
    def empty(cls) -> "IdentityProfile":
        """Profile meaning "don't touch the git identity"."""
        return cls("", "")

    @property
    def is_empty(self) -> bool:
        """True if both fields are blank after trimming."""
        return not self.name.strip() and not self.email.strip()

    @property
    def display_string(self) -> str:
        """
        Human-readable label.

        "Jane Doe <jane@example.com>" when both fields are set, otherwise
        whichever field is present.
        """
        name = self.name.strip()
        email = self.email.strip()
        if name and email:
            return f"{name} <{email}>"
        if email:
            return email
        if name:
            return name
        return EMPTY_DISPLAY

    def sort_key(self) -> str:
        return self.display_string.casefold()

    def normalized(self) -> "IdentityProfile":
        """Copy with surrounding whitespace removed from both fields."""
        return IdentityProfile(self.name.strip(), self.email.strip())

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "email": self.email}

    @classmethod
    def from_dict(cls, data: object) -> "IdentityProfile | None":
        """
        Build a profile from a decoded JSON object.

        Returns None if the object doesn't have string name/email fields.
        """
        if not isinstance(data, dict):
            return None
        name = data.get("name", "")
        email = data.get("email", "")
        if not isinstance(name, str) or not isinstance(email, str):
            return None
        return cls(name, email)

    def __str__(self) -> str:
        return self.display_string


def sort_profiles(profiles: list[IdentityProfile]) -> list[IdentityProfile]:
    """Return profiles ordered by display label, case-insensitively."""
    return sorted(profiles, key=IdentityProfile.sort_key)
