"""Thin wrapper around OpenCV VideoCapture."""

import cv2


class VideoStream:
    def __init__(self, device_index: int = 0, *, width: int | None = None, height: int | None = None) -> None:
        self.device_index = device_index
        self.width = width
        self.height = height
        self._cap = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None

    def open(self) -> None:
        if self._cap is not None:
            return

        self._cap = cv2.VideoCapture(self.device_index)
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise RuntimeError(f"Unable to open camera at index {self.device_index}.")
        if self.width:
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        if self.height:
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)

    def read(self):
        if self._cap is None:
            raise RuntimeError("VideoStream not opened.")
        return self._cap.read()

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
