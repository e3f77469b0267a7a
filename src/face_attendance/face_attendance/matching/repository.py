from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import EnrolledDescriptor


class DescriptorRepository(Protocol):
    def list_all(self) -> Sequence[EnrolledDescriptor]:
        raise NotImplementedError

    def get(self, identity_id: int) -> Optional[EnrolledDescriptor]:
        raise NotImplementedError

    def upsert(self, descriptor: EnrolledDescriptor) -> None:
        """Insert or replace the one active descriptor of ``descriptor.identity_id``."""

        raise NotImplementedError

    def delete(self, identity_id: int) -> bool:
        raise NotImplementedError
