"""
Name: Entity Identity Capability

Responsibilities:
  - Give entities "identity and equality by id" without a base hierarchy

Notes:
  - Compose into a dataclass declared with eq=False so the dataclass
    does not generate a field-by-field __eq__ over it
"""

from uuid import UUID


class IdentifiedById:
    """R: Equality and hashing by the `id` attribute only."""

    id: UUID

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))
