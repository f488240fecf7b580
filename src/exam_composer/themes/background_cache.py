"""
Module: themes.background_cache

Purpose:
    Decode each theme background image at most once per generation run.
    Entries are keyed by (theme_id, asset_path) and hold a reportlab
    ImageReader, so every page of the run reuses the same embedded image.

Key Classes:
    - BackgroundAssetCache: Run-scoped cache with fallback chain
    - BackgroundHandle: Decoded background image

Lifecycle:
    clear() must be called before a run starts and after it completes.
    The DocumentAssembler does both; a cache shared between assemblers
    would otherwise leak one run's handles into the next.

Dependencies:
    - PIL: Image decoding
    - reportlab: ImageReader for canvas embedding
    - concurrent.futures (std): Bounded read timeout

Used By:
    - exam_composer.controller: Owned by DocumentAssembler
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from PIL import Image
from reportlab.lib.utils import ImageReader

from exam_composer.config import GLOBAL_FALLBACK_BACKGROUND

logger = logging.getLogger(__name__)

# Sentinel stored when no candidate could be loaded
NO_BACKGROUND = None


@dataclass(frozen=True)
class BackgroundHandle:
    """
    Decoded background ready for drawing.

    Attributes:
        reader: ImageReader wrapping the decoded image
        source_path: Path the image was actually read from
        size: Pixel size (width, height)
    """

    reader: ImageReader
    source_path: Path
    size: Tuple[int, int]


class BackgroundAssetCache:
    """
    Process-local cache of decoded background images.

    Example:
        >>> cache = BackgroundAssetCache(asset_root=Path("public"))
        >>> handle = cache.get_or_load("classic", "themes/classic-light.png")
        >>> cache.get_or_load("classic", "themes/classic-light.png") is handle
        True
        >>> cache.load_count
        1
    """

    def __init__(
        self,
        asset_root: Optional[Path] = None,
        global_fallback_path: Optional[str] = GLOBAL_FALLBACK_BACKGROUND,
        load_timeout: float = 5.0,
    ) -> None:
        self.asset_root = Path(asset_root) if asset_root is not None else None
        self.global_fallback_path = global_fallback_path
        self.load_timeout = load_timeout
        self.load_count = 0
        self._entries: Dict[Tuple[str, str], Optional[BackgroundHandle]] = {}
        self._lock = threading.Lock()

    def get_or_load(
        self,
        theme_id: str,
        asset_path: str,
        fallback_paths: Iterable[str] = (),
    ) -> Optional[BackgroundHandle]:
        """
        Return the cached background, loading it on first use.

        Tries asset_path, then fallback_paths in order, then the global
        fallback. Failures are logged and never raised.

        Returns:
            BackgroundHandle, or NO_BACKGROUND if every candidate failed
        """
        key = (theme_id, asset_path)
        with self._lock:
            if key in self._entries:
                return self._entries[key]

            handle = NO_BACKGROUND
            for candidate in self._candidates(asset_path, fallback_paths):
                handle = self._try_load(candidate)
                if handle is not None:
                    break

            if handle is NO_BACKGROUND:
                logger.warning(
                    f"All background options failed for theme {theme_id!r}, "
                    "using flat fill"
                )
            self._entries[key] = handle
            return handle

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug(f"Background cache cleared ({count} entries)")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def _candidates(self, asset_path: str, fallback_paths: Iterable[str]) -> List[str]:
        """Ordered, de-duplicated candidate list."""
        ordered = [asset_path, *fallback_paths]
        if self.global_fallback_path:
            ordered.append(self.global_fallback_path)

        seen = set()
        result = []
        for path in ordered:
            if path and path not in seen:
                seen.add(path)
                result.append(path)
        return result

    def _resolve(self, asset_path: str) -> Path:
        if self.asset_root is None:
            return Path(asset_path)
        # Web-style "/themes/x.png" paths are relative to the asset root
        return self.asset_root / asset_path.lstrip("/")

    def _try_load(self, asset_path: str) -> Optional[BackgroundHandle]:
        path = self._resolve(asset_path)
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(_decode_image, path)
            image = future.result(timeout=self.load_timeout)
        except FutureTimeoutError:
            logger.warning(
                f"Background loading timed out after {self.load_timeout}s: {path}"
            )
            return None
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            logger.warning(f"Background loading failed for {path}: {e}")
            return None
        finally:
            executor.shutdown(wait=False)

        self.load_count += 1
        logger.info(f"Background loaded: {path} ({image.width}x{image.height})")
        return BackgroundHandle(
            reader=ImageReader(image),
            source_path=path,
            size=(image.width, image.height),
        )


def _decode_image(path: Path) -> Image.Image:
    """Read and fully decode an image as RGB."""
    with Image.open(path) as img:
        img.load()
        return img.convert("RGB")
