"""Abstract base class for leaderboard data sources."""

from abc import ABC, abstractmethod


class SheetSource(ABC):
    """
    Abstract interface for the tabular leaderboard export.

    This abstraction allows swapping the published spreadsheet for any
    other endpoint that serves the same delimited text (or for a fixed
    payload in tests).
    """

    @abstractmethod
    async def fetch_text(self) -> str:
        """
        Retrieve the raw export text.

        Returns:
            The body of the export, decoded as UTF-8

        Raises:
            FetchFailure: if no source produced a successful response
        """
        pass

    async def close(self) -> None:
        """
        Clean up resources (e.g., close HTTP sessions).

        Override this if the data source holds resources that need cleanup.
        """
        pass
