from pathlib import Path
from typing import Union
import logging
import os
import signal
import numpy as np
import cv2
from PIL import Image as PILImage
from dotenv import load_dotenv

from ..models.image import Image, PIXEL_DTYPE
from ..exceptions import InvalidArgumentError

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

PPM_EXT = ".ppm"
ALPHA_EXTS = {".png"}


class ImageRepository:
    """
    Handles file I/O for Image entities.
    Plain-text PPM (P3) is parsed here; other formats are decoded by OpenCV
    and encoded by Pillow. Everything else in the package only sees Image.
    """
    def __init__(self):
        exts = os.getenv("VALID_IMAGE_EXTENSIONS", ".ppm,.png,.jpg,.jpeg,.bmp")
        self.VALID_EXTS = {ext.strip().lower() for ext in exts.split(",") if ext.strip()}
        self.LOAD_TIMEOUT = int(os.getenv("IMAGE_LOAD_TIMEOUT", "5"))

    def _checked_extension(self, path: Path) -> str:
        ext = path.suffix.lower()
        if ext not in self.VALID_EXTS:
            raise InvalidArgumentError(f"Unsupported image format: '{path.name}'")
        return ext

    # ─── Reading ──────────────────────────────────────────────────────
    def load(self, path: Union[str, Path]) -> Image:
        path = Path(path)
        ext = self._checked_extension(path)
        if ext == PPM_EXT:
            return self._read_ppm(path)
        return self._read_with_opencv(path)

    def _read_with_opencv(self, path: Path) -> Image:
        timeout = self.LOAD_TIMEOUT

        # ─── timeout wrapper ──────────────────────────────────────────────
        def _handler(signum, frame):
            raise TimeoutError(f"cv2.imread timed-out after {timeout}s: {path}")

        signal.signal(signal.SIGALRM, _handler)
        signal.alarm(timeout)
        try:
            arr = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        finally:
            signal.alarm(0)  # always disarm
        # ──────────────────────────────────────────────────────────────────

        if arr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        return Image(self._to_rgba(arr))

    @staticmethod
    def _to_rgba(arr: np.ndarray) -> np.ndarray:
        """OpenCV hands back gray, BGR or BGRA; the model wants RGBA."""
        if arr.dtype == np.uint16:
            arr = (arr // 257).astype(np.uint8)
        if arr.ndim == 2:
            return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
        if arr.shape[2] == 3:
            return cv2.cvtColor(arr, cv2.COLOR_BGR2RGBA)
        return cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)

    @staticmethod
    def _read_ppm(path: Path) -> Image:
        if not path.is_file():
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        tokens = []
        try:
            with path.open("r", encoding="utf-8") as fh:
                for line in fh:
                    tokens.extend(line.split("#", 1)[0].split())
        except UnicodeDecodeError:
            # binary P6 and other non-text files
            raise InvalidArgumentError(f"Invalid PPM file format, expected plain-text P3: {path}") from None

        if not tokens or tokens[0] != "P3":
            raise InvalidArgumentError(f"Invalid PPM file format: {path}")
        try:
            width, height, _max_value = (int(t) for t in tokens[1:4])
            values = np.array(tokens[4:], dtype=PIXEL_DTYPE)
        except (ValueError, OverflowError):
            raise InvalidArgumentError(f"Invalid PPM header or data: {path}") from None

        count = width * height * 3
        if width < 1 or height < 1 or values.size < count:
            raise InvalidArgumentError(f"PPM data is truncated: {path}")

        rgb = values[:count].reshape(height, width, 3)
        alpha = np.full((height, width, 1), 255, dtype=PIXEL_DTYPE)
        logger.debug(f"Read {width}x{height} PPM from {path}")
        return Image(np.concatenate([rgb, alpha], axis=2))

    # ─── Writing ──────────────────────────────────────────────────────
    def save(self, image: Image, path: Union[str, Path]) -> None:
        path = Path(path)
        ext = self._checked_extension(path)
        if ext == PPM_EXT:
            self._write_ppm(image, path)
            return

        data = np.clip(image.pixels, 0, 255).astype(np.uint8)
        if ext not in ALPHA_EXTS:
            data = data[:, :, :3]
        PILImage.fromarray(np.ascontiguousarray(data)).save(path)

    @staticmethod
    def _write_ppm(image: Image, path: Path) -> None:
        values = np.clip(image.pixels[:, :, :3], 0, 255).reshape(-1)
        lines = ["P3", f"{image.width} {image.height}", "255"]
        lines.extend(str(v) for v in values.tolist())
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
