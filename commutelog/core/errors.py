"""
Error types for CommuteLog runs
"""


class CommuteLogError(Exception):
    """Base error for CommuteLog"""
    pass


class ConfigurationError(CommuteLogError):
    """Configuration is missing or unusable; aborts the run before any request"""
    pass


class PermutationLimitError(CommuteLogError):
    """Too many home/work combinations for a single run"""

    def __init__(self, permutations: int, limit: int):
        self.permutations = permutations
        self.limit = limit
        super().__init__(
            f"Exceeded permutations limit: {permutations} > {limit}. "
            "Please reduce the number of locations."
        )


class RemoteFetchError(CommuteLogError):
    """A single distance query returned an unusable response"""

    def __init__(self, origin: str, destination: str, reason: str):
        self.origin = origin
        self.destination = destination
        self.reason = reason
        super().__init__(f"{origin} -> {destination}: {reason}")


class PersistenceError(CommuteLogError):
    """Bulk write to the storage backend failed"""
    pass
