"""Player gateway: run the ``alda`` executable and talk to an alda REPL server."""

from __future__ import annotations

import json
import logging
import os
import subprocess
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Callable, Sequence

from aldanote.errors import CommandFailed, ReplConnectionError
from aldanote.event_decoder import decode_events
from aldanote.stringify import render

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "alda"
EXECUTABLE_ENV_VAR = "ALDA_EXECUTABLE"
PORT_FILE_NAME = ".alda-nrepl-port"


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured output of one command."""

    exit_code: int
    stdout: str
    stderr: str


Runner = Callable[[Sequence[str]], CommandResult]


def _tee(pipe: IO[str], sink: IO[str], lines: list[str]) -> None:
    for line in pipe:
        sink.write(line)
        sink.flush()
        lines.append(line)


def run_command(argv: Sequence[str], stream: bool = False) -> CommandResult:
    """
    Run a command and capture its output.

    With ``stream`` the child's stdout and stderr are also echoed to ours
    line by line while it runs, so ``alda play`` messages show up live.

    Raises:
        CommandFailed: If the executable cannot be started.
    """
    logger.debug("Running %s", argv)
    try:
        if not stream:
            completed = subprocess.run(
                list(argv),
                capture_output=True,
                text=True,
                check=False,
            )
            return CommandResult(completed.returncode, completed.stdout, completed.stderr)
        proc = subprocess.Popen(
            list(argv),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except OSError as exc:
        raise CommandFailed(argv[0], argv[1:], exit_code=-1, stderr=str(exc)) from exc

    assert proc.stdout is not None and proc.stderr is not None
    out: list[str] = []
    err: list[str] = []
    readers = [
        threading.Thread(target=_tee, args=(proc.stdout, sys.stdout, out), daemon=True),
        threading.Thread(target=_tee, args=(proc.stderr, sys.stderr, err), daemon=True),
    ]
    for reader in readers:
        reader.start()
    exit_code = proc.wait()
    for reader in readers:
        reader.join()
    proc.stdout.close()
    proc.stderr.close()
    return CommandResult(exit_code, "".join(out), "".join(err))


def stream_command(argv: Sequence[str]) -> CommandResult:
    """A :data:`Runner` that echoes output live; see :func:`run_command`."""
    return run_command(argv, stream=True)


def default_executable() -> str:
    return os.environ.get(EXECUTABLE_ENV_VAR, DEFAULT_EXECUTABLE)


@dataclass(frozen=True)
class ReplSession:
    """
    Address of a running alda REPL server (``alda repl --server``).

    Usage:

        session = ReplSession.from_port_file()
        client = AldaClient(session=session)
        client.play(part("piano"), note(pitch("c")))
    """

    port: int
    host: str = "localhost"

    @classmethod
    def from_port_file(cls, directory: str | Path | None = None, host: str = "localhost") -> "ReplSession":
        """
        Read the port from the ``.alda-nrepl-port`` file alda writes on startup.

        Raises:
            ReplConnectionError: If the file does not exist.
            ValueError: If the file does not contain a port number.
        """
        port_file = Path(directory if directory is not None else Path.cwd()) / PORT_FILE_NAME
        if not port_file.is_file():
            raise ReplConnectionError(
                f"No port given and no {PORT_FILE_NAME} file found in '{port_file.parent}'."
            )
        return cls(port=int(port_file.read_text(encoding="utf-8").strip()), host=host)


class AldaClient:
    """
    Sends alda code to the ``alda`` executable.

    Without a session every ``play`` runs ``alda play`` in an isolated
    context. With a :class:`ReplSession` code is evaluated in the REPL
    server's score, which keeps tempo, octave, instruments and variables
    between calls.
    """

    def __init__(
        self,
        executable: str | None = None,
        session: ReplSession | None = None,
        runner: Runner | None = None,
    ) -> None:
        self.executable = executable or default_executable()
        self.session = session
        self.runner = runner or run_command

    # ------------------------------------------------------------------
    # Command line
    # ------------------------------------------------------------------

    def alda(self, *args: str) -> str:
        """
        Run ``alda`` with ``args`` and return its stdout.

        Raises:
            CommandFailed: If the exit status is non-zero.
        """
        result = self.runner([self.executable, *args])
        if result.exit_code != 0:
            logger.warning("%s exited with status %d", self.executable, result.exit_code)
            raise CommandFailed(
                self.executable,
                args,
                result.exit_code,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result.stdout

    def version(self) -> str:
        return self.alda("version").strip()

    # ------------------------------------------------------------------
    # REPL server
    # ------------------------------------------------------------------

    def _require_session(self) -> ReplSession:
        if self.session is None:
            raise ReplConnectionError("No alda REPL server configured; pass a ReplSession.")
        return self.session

    def send_message(self, message: dict[str, Any]) -> Any:
        """Send one message to the REPL server and return the decoded reply."""
        session = self._require_session()
        logger.debug("REPL %s:%d <- %s", session.host, session.port, message.get("op"))
        reply = self.alda(
            "repl",
            "--host",
            session.host,
            "--port",
            str(session.port),
            "--message",
            json.dumps(message),
        )
        return json.loads(reply)

    def score_text(self) -> str:
        """Return the alda code loaded into the REPL session."""
        return str(self.send_message({"op": "score-text"}).get("text", "")).strip()

    def new_score(self) -> Any:
        """Reset the REPL server's state and start a new score."""
        return self.send_message({"op": "new-score"})

    # ------------------------------------------------------------------
    # Playback and parsing
    # ------------------------------------------------------------------

    def play(self, *events: Any) -> str:
        """Render ``events`` to alda code, play it and return the code."""
        code = render(events)
        if self.session is not None:
            self.send_message({"op": "eval-and-play", "code": code})
        else:
            self.alda("play", "--code", code)
        return code

    def stop(self) -> None:
        """Stop playback in the REPL session, or globally without one."""
        if self.session is not None:
            self.send_message({"op": "stop"})
        else:
            self.alda("stop")

    def parse_events(self, *events: Any) -> list[Any]:
        """Render ``events``, have alda parse the code and decode the result."""
        output = self.alda("parse", "--output", "events", "--code", render(events))
        return decode_events(json.loads(output))
