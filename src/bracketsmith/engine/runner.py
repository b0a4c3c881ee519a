from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from tqdm import tqdm

from bracketsmith.core.normalizer import BracketNormalizer
from bracketsmith.files.walker import WalkConfig, iter_files


class BracketSmith:
    def __init__(
        self,
        normalizer: Optional[BracketNormalizer] = None,
        walk_cfg: Optional[WalkConfig] = None,
        dry_run: bool = False,
        verbose: bool = False,
        progress: bool = False,
    ) -> None:
        self.normalizer = normalizer or BracketNormalizer()
        self.walk_cfg = walk_cfg or WalkConfig()
        self.dry_run = dry_run
        self.verbose = verbose
        self.progress = progress

        self.processed_count = 0
        self.changed_count = 0
        self.changed_files: List[str] = []
        self.failed_files: List[str] = []
        self.non_converged_files: List[str] = []

    def run(self, paths: Iterable[Union[str, Path]] = ()) -> bool:
        """Process the given paths, or every configured directory when none are given."""
        self.log("🔧 Processing array spacing...")

        success = True
        targets = list(paths)
        if targets:
            for path in targets:
                if not self.process_path(path):
                    success = False
        else:
            for directory in self.walk_cfg.directories:
                if not self.process_directory(directory):
                    success = False

        self.log(self.summary())
        return success

    def process_directory(self, dir_path: Union[str, Path]) -> bool:
        if not Path(dir_path).is_dir():
            self.log(f"⚠️ Directory not found: {dir_path}")
            return True  # not fatal

        try:
            files = list(iter_files(dir_path, self.walk_cfg))
        except OSError as e:
            self.error(f"❌ Error processing directory {dir_path}: {e}")
            return False

        ok = True
        for file_path in tqdm(files, desc=str(dir_path), unit="file", disable=not self.progress):
            if not self.process_file(file_path):
                ok = False
        return ok

    def process_path(self, path: Union[str, Path]) -> bool:
        p = Path(path)
        if not p.exists():
            self.error(f"❌ Path not found: {path}")
            self.failed_files.append(str(path))
            return False
        if p.is_dir():
            return self.process_directory(p)
        return self.process_file(p)

    def process_file(self, path: Union[str, Path]) -> bool:
        p = Path(path)
        self.processed_count += 1

        try:
            # newline="" keeps CRLF line endings byte-identical on write.
            with open(p, "r", encoding="utf-8", newline="") as f:
                content = f.read()

            result = self.normalizer.normalize(content)
            if not result.converged:
                self.log(f"⚠️ No fixed point after {result.passes} passes: {p}")
                self.non_converged_files.append(str(p))

            if not result.changed:
                self.verbose_log(f"⏭️ No changes needed: {p}")
                return True

            self.changed_count += 1
            self.changed_files.append(str(p))
            if self.dry_run:
                self.verbose_log(f"🔍 Would be processed: {p}")
            else:
                with open(p, "w", encoding="utf-8", newline="") as f:
                    f.write(result.text)
                self.verbose_log(f"✅ Processed: {p}")
            return True
        except (OSError, UnicodeDecodeError) as e:
            self.error(f"❌ Error processing file {p}: {e}")
            self.failed_files.append(str(p))
            return False

    def stats(self) -> Dict[str, int]:
        return {"processed": self.processed_count, "changed": self.changed_count}

    def summary(self) -> str:
        if self.dry_run:
            return (
                f"🔍 Verification completed: {self.changed_count} of {self.processed_count} "
                "files would require changes."
            )
        return f"✅ Processing completed: {self.changed_count} of {self.processed_count} files were changed."

    def report(self) -> Dict[str, Any]:
        return {
            "created_at": datetime.now(timezone.utc).isoformat(),
            "dry_run": self.dry_run,
            "stats": self.stats(),
            "changed_files": list(self.changed_files),
            "failed_files": list(self.failed_files),
            "non_converged_files": list(self.non_converged_files),
        }

    def log(self, message: str) -> None:
        print(message)

    def verbose_log(self, message: str) -> None:
        if self.verbose:
            print(message)

    def error(self, message: str) -> None:
        print(message, file=sys.stderr)
