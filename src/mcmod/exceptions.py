# Custom exceptions for mcmod

class McmodError(Exception):
    """Base exception for all application-specific errors."""
    pass


class ValidationError(McmodError):
    """Raised when user-supplied identity values are malformed."""
    pass


class InvalidModIdError(ValidationError):
    """Raised when a mod id does not match ^[a-z][a-z0-9_]*$."""
    def __init__(self, mod_id: str):
        self.mod_id = mod_id
        super().__init__(f"Invalid mod ID '{mod_id}': must match ^[a-z][a-z0-9_]*$")


class InvalidPackageError(ValidationError):
    """Raised when a package name is not dot-separated lowercase segments."""
    def __init__(self, package: str):
        self.package = package
        super().__init__(
            f"Invalid package '{package}': must match ^[a-z][a-z0-9_]*(\\.[a-z][a-z0-9_]*)*$"
        )


class InvalidValueError(ValidationError):
    """Raised when a preference value cannot be parsed for its key."""
    pass


class StateError(McmodError):
    """Raised when an operation does not fit the current project state."""
    pass


class AlreadyEnabledError(StateError):
    """Raised when adding a feature whose flag is already set."""
    def __init__(self, feature: str):
        self.feature = feature
        super().__init__(f"Feature '{feature}' is already enabled")


class NotEnabledError(StateError):
    """Raised when an operation needs a feature that is not enabled."""
    def __init__(self, feature: str):
        self.feature = feature
        super().__init__(f"Feature '{feature}' is not enabled")


class ConfigNotFoundError(StateError):
    """Raised when a project has no mcmod.toml."""
    def __init__(self, path=None):
        self.path = path
        super().__init__("mcmod.toml not found - run `mcmod init` first")


class SerializationError(McmodError):
    """Raised when structured text cannot be encoded or decoded."""
    pass


class NetworkError(McmodError):
    """Raised for transport failures and malformed remote responses."""
    pass


class UnsupportedPlatformError(McmodError):
    """Raised when no release asset exists for this OS/architecture."""
    def __init__(self, system: str, machine: str):
        self.system = system
        self.machine = machine
        super().__init__(f"Unsupported platform: {system}/{machine}")
