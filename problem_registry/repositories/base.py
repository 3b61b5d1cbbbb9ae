"""
Base repository defining the storage operations the registry relies on.
"""
from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

ModelType = TypeVar("ModelType")


class BaseRepository(ABC, Generic[ModelType]):
    """Storage interface for records keyed by a sequential integer id."""

    @abstractmethod
    def next_id(self) -> int:
        """
        Allocate the next record id.

        Ids are strictly increasing and never handed out twice, even after
        the record holding them has been removed.

        Returns:
            The allocated id
        """

    @abstractmethod
    def add(self, obj: ModelType) -> ModelType:
        """
        Store a new record.

        Args:
            obj: Record to store; its id must come from next_id()

        Returns:
            The stored record
        """

    @abstractmethod
    def get(self, id: int) -> Optional[ModelType]:
        """
        Get a single record by id.

        Args:
            id: Record id

        Returns:
            The record or None if not found
        """

    @abstractmethod
    def list(self) -> List[ModelType]:
        """
        Get all records in insertion order.

        Returns:
            A new list; changing it does not affect the stored collection
        """

    @abstractmethod
    def replace(self, obj: ModelType) -> ModelType:
        """
        Replace an existing record with a new version, keeping its position.

        Args:
            obj: New version of the record

        Returns:
            The stored record

        Raises:
            KeyError: If no record with that id exists
        """

    @abstractmethod
    def remove(self, id: int) -> Optional[ModelType]:
        """
        Remove a record by id.

        Args:
            id: Record id

        Returns:
            The removed record, or None if not found
        """

    def exists(self, id: int) -> bool:
        """Check if a record exists by id."""
        return self.get(id) is not None

    def count(self) -> int:
        """Count all records."""
        return len(self.list())
