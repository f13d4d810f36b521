"""
Capture device interface used for exam snapshots.
"""
from abc import ABC, abstractmethod
from typing import Optional


class CaptureDevice(ABC):
    """A camera the exam session can take frames from.

    `open()` asks for access and raises CaptureError when it is denied.
    `grab()` returns an encoded frame (e.g. a base64 data URL) or None when
    no frame is available right now.
    """

    @abstractmethod
    async def open(self) -> None:
        pass

    @abstractmethod
    async def grab(self) -> Optional[str]:
        pass

    @abstractmethod
    async def close(self) -> None:
        pass
