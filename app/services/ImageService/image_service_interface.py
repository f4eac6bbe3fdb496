from abc import ABC, abstractmethod

from app.entities.message import ImageAttachment


class ImageServiceInterface(ABC):
    @abstractmethod
    def encode(self, path: str) -> ImageAttachment:
        """Read an image file and return it as an inline base64 attachment."""
