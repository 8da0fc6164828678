"""
Open a rendered story in a viewer and hand it to the platform print facility.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
import threading
import webbrowser
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_DELAY = 1.0

Viewer = Callable[[str], bool]
PrintCommand = Callable[[Path], None]


def default_viewer(uri: str) -> bool:
    return webbrowser.open(uri, new=1)


def default_print_command(path: Path) -> None:
    if sys.platform == "win32":
        os.startfile(str(path), "print")  # type: ignore[attr-defined]
        return

    command = shutil.which("lp") or shutil.which("lpr")
    if command is None:
        raise RuntimeError("No print command (lp/lpr) found on this system.")
    subprocess.run([command, str(path)], check=True)


class PrintJob:
    """
    Shows a PDF and prints it once, either when the viewer reports it loaded or
    when the fallback timer fires, whichever comes first.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        viewer: Viewer | None = None,
        print_command: PrintCommand | None = None,
        fallback_delay: float = DEFAULT_FALLBACK_DELAY,
        owned_dir: Path | str | None = None,
    ) -> None:
        self.path = Path(path)
        self._viewer = viewer or default_viewer
        self._print_command = print_command or default_print_command
        self.fallback_delay = fallback_delay
        self._lock = threading.Lock()
        self._printed = False
        self._timer: threading.Timer | None = None
        self._owned_dir = Path(owned_dir) if owned_dir is not None else None
        self.error: BaseException | None = None

    @property
    def printed(self) -> bool:
        return self._printed

    def open(self) -> "PrintJob":
        # Nothing is scheduled until the viewer call has returned.
        loaded = self._viewer(self.path.resolve().as_uri())

        self._timer = threading.Timer(self.fallback_delay, self._fallback_print)
        self._timer.daemon = True
        self._timer.start()

        if loaded:
            self.trigger_print()
        else:
            logger.debug("Viewer did not confirm load; waiting for fallback timer.")
        return self

    def trigger_print(self) -> bool:
        """
        Invoke the print command; later calls are no-ops and return False.
        """
        with self._lock:
            if self._printed:
                return False
            self._printed = True

        logger.info("Sending %s to the printer", self.path)
        self._print_command(self.path)
        return True

    def wait(self, timeout: float | None = None) -> None:
        """
        Block until the fallback timer has run; re-raises a print failure from it.
        """
        if self._timer is not None:
            self._timer.join(timeout)
        if self.error is not None:
            raise self.error

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()

    def cleanup(self) -> None:
        """
        Cancel the fallback and remove the temporary directory the PDF was written to.

        Only directories created for this job are removed; call once the viewer no
        longer needs the file.
        """
        self.cancel()
        if self._owned_dir is not None:
            shutil.rmtree(self._owned_dir, ignore_errors=True)
            self._owned_dir = None

    def _fallback_print(self) -> None:
        try:
            self.trigger_print()
        except Exception as exc:
            logger.error("Printing %s failed: %s", self.path, exc)
            self.error = exc
