# -*- coding: utf-8 -*-
"""
src/typefont/storage/font_storage.py

Reads the font catalog: an index of font names plus one JSON data file per
font. Both can live on disk or behind an http(s) URL.

Index file:

    {"index": ["font-name", "font-name-1", ...]}

Font data file (`<fonts_directory><name>/<fonts_data>`):

    {
        "meta": {"name": "...", "author": "...", "uri": "...", ...},
        "alpha": {"a": "<base64 png>", "b": "<base64 png>", ...}
    }

Every `meta` entry is echoed into that font's result.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import httpx

from ..errors import CatalogFetchError
from ..models import Font, FontIndex

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 30.0


def _is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


class FontStorage:
    """
    Fetches the font index and individual fonts.

    Use it as an async context manager when fetching over HTTP so the
    underlying `httpx.AsyncClient` is closed; a client passed in by the caller
    is never closed here.
    """

    def __init__(
        self,
        fonts_index: str,
        fonts_directory: str,
        fonts_data: str,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.fonts_index = str(fonts_index)
        self.fonts_directory = str(fonts_directory)
        self.fonts_data = str(fonts_data)
        self._client = client
        self._owns_client = False

    async def __aenter__(self) -> "FontStorage":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=HTTP_TIMEOUT, follow_redirects=True)
            self._owns_client = True
        return self._client

    def font_location(self, name: str) -> str:
        """Where the data file of font `name` is read from."""
        return f"{self.fonts_directory}{name}/{self.fonts_data}"

    async def _read_json(self, location: str, font: Optional[str] = None) -> Any:
        try:
            if _is_url(location):
                response = await self._http().get(location)
                response.raise_for_status()
                text = response.text
            else:
                text = await asyncio.to_thread(Path(location).read_text, encoding="utf-8")
            return json.loads(text)
        except (OSError, UnicodeDecodeError, httpx.HTTPError) as e:
            raise CatalogFetchError(f"Unable to read {location}: {e}", font=font, location=location) from e
        except json.JSONDecodeError as e:
            raise CatalogFetchError(f"Malformed JSON in {location}: {e}", font=font, location=location) from e

    async def fetch_index(self) -> FontIndex:
        """
        Reads the list of font names.

        Raises:
            CatalogFetchError: If the file is unreadable or has no "index" list.
        """
        content = await self._read_json(self.fonts_index)
        index = content.get("index") if isinstance(content, dict) else None
        if not isinstance(index, list) or not all(isinstance(name, str) for name in index):
            raise CatalogFetchError("Unable to open the fonts index.", location=self.fonts_index)

        logger.info(f"Fonts index lists {len(index)} fonts.")
        return tuple(index)

    async def fetch_font(self, name: str) -> Font:
        """
        Reads one font's metadata and reference alphabet.

        Raises:
            CatalogFetchError: If the file is unreadable or has no "alpha" mapping.
        """
        location = self.font_location(name)
        content = await self._read_json(location, font=name)
        alpha = content.get("alpha") if isinstance(content, dict) else None
        if not isinstance(alpha, dict):
            raise CatalogFetchError(f"Unable to open the {name} font.", font=name, location=location)

        meta = content.get("meta") or {}
        if not isinstance(meta, dict):
            raise CatalogFetchError(f"Font {name} has malformed meta.", font=name, location=location)

        logger.debug(f"Loaded font '{name}' with {len(alpha)} reference glyphs.")
        return Font(name=name, meta=dict(meta), alphabet=dict(alpha))
