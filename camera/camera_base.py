from abc import ABC, abstractmethod
import numpy as np


class CameraSource(ABC):
    """
    Abstract frame source for the detection loop.
    Use as a context manager so the device is always released.
    """

    @abstractmethod
    def start(self) -> None:
        ...

    @abstractmethod
    def read(self) -> tuple[bool, np.ndarray]:
        """
        Grab the next frame.
        Returns (success, frame) where frame is a BGR numpy array.
        Raises RuntimeError if called before start().
        """
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    @property
    @abstractmethod
    def is_running(self) -> bool:
        ...

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *args):
        self.stop()
