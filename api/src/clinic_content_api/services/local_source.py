"""Per-locale JSON documents on disk.

Layout inside the content directory::

    en.json
    ar.json
    en.backup.<epoch_ms>.json   # written before every overwrite, never pruned

Backup and write are two separate steps; a crash in between leaves a
backup next to an unchanged primary file.
"""

from __future__ import annotations

import json
import logging
import shutil
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Union

from clinic_models import Locale

from clinic_content_api.errors import ContentNotFoundError, ContentParseError

logger = logging.getLogger(__name__)


class LocalContentSource:
    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    def path_for(self, locale: Locale) -> Path:
        return self.directory / f"{Locale(locale).value}.json"

    def load(self, locale: Locale) -> Any:
        path = self.path_for(locale)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ContentNotFoundError(f"Content file not found for locale: {Locale(locale).value}") from exc
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ContentParseError(f"{path.name} is not valid JSON: {exc}") from exc

    def _backup_path(self, locale: Locale) -> Path:
        stamp = int(time.time() * 1000)
        candidate = self.directory / f"{Locale(locale).value}.backup.{stamp}.json"
        while candidate.exists():
            stamp += 1
            candidate = self.directory / f"{Locale(locale).value}.backup.{stamp}.json"
        return candidate

    def save(self, locale: Locale, document: Any) -> Optional[Path]:
        """Write ``document`` for ``locale``; returns the backup path if a previous file existed."""
        path = self.path_for(locale)
        self.directory.mkdir(parents=True, exist_ok=True)

        backup: Optional[Path] = None
        if path.exists():
            backup = self._backup_path(locale)
            shutil.copyfile(path, backup)
            logger.info("Content backup created", extra={"locale": Locale(locale).value, "backup": str(backup)})

        path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Content file saved", extra={"locale": Locale(locale).value, "path": str(path)})
        return backup

    def backups(self, locale: Locale) -> List[Path]:
        return sorted(self.directory.glob(f"{Locale(locale).value}.backup.*.json"))

    def snapshot(self, target_root: Union[str, Path]) -> Path:
        """Copy every existing locale file into ``target_root/<timestamp>/``."""
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        target = Path(target_root) / stamp
        target.mkdir(parents=True, exist_ok=True)
        for locale in Locale:
            src = self.path_for(locale)
            if src.exists():
                shutil.copyfile(src, target / src.name)
        logger.info("Content snapshot created", extra={"target": str(target)})
        return target
