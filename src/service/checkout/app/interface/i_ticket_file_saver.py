from abc import ABC, abstractmethod


class ITicketFileSaver(ABC):
    """Platform save/share capability (downloads folder or share sheet)"""

    @abstractmethod
    async def save(self, *, filename: str, content: bytes, mime_type: str) -> str:
        """Persist the document and return where it went"""
        pass
