"""This module defines the Cursor dataclass tracking the position within the update stream."""

from dataclasses import dataclass


@dataclass
class Cursor:
    """
    A dataclass holding the offset of the next update to request from the source.

    :param offset: The identifier of the next update to request
    """

    offset: int = 0

    def advance(self, update_id: int) -> bool:
        """
        Move the cursor past the given update. The offset never moves backwards.

        :param update_id: the identifier of an update which has been observed
        :return: whether the offset changed
        """
        next_offset = update_id + 1
        if next_offset <= self.offset:
            return False
        self.offset = next_offset
        return True


LATEST_OFFSET = -1
"""LATEST_OFFSET is a special offset: only returns the most recent pending update."""
