"""
Error taxonomy for a school search.

Each error carries a short message meant for the person who typed the city
name; the presentation layer shows `str(err)` as-is.
"""

from __future__ import annotations


class SchoolFinderError(RuntimeError):
    pass


class EmptyInput(SchoolFinderError):
    def __init__(self, message: str = "Please enter a city") -> None:
        super().__init__(message)


class NotFound(SchoolFinderError):
    def __init__(self, city: str) -> None:
        super().__init__(f"City not found: {city}")
        self.city = city


class ServiceError(SchoolFinderError):
    pass


class AllServersFailed(ServiceError):
    def __init__(self, attempted: list[str]) -> None:
        super().__init__("All Overpass servers failed")
        self.attempted = list(attempted)


class NoResults(SchoolFinderError):
    def __init__(self, city: str) -> None:
        super().__init__("No schools found in this area")
        self.city = city


class SearchSuperseded(SchoolFinderError):
    def __init__(self, city: str) -> None:
        super().__init__(f"Search for {city!r} was replaced by a newer search")
        self.city = city
