"""
AzureAD module driven through an interactive PowerShell process.

Commands are streamed to the shell's stdin from a writer thread while stdout
and stderr are drained, so a chatty shell can never block on a full pipe
while input is still being written.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from dataclasses import dataclass
from typing import IO, FrozenSet, List, Sequence

from polarissync.domain.config import ActiveDirectorySettings, AzureSettings
from polarissync.domain.errors import CloudDirectoryError
from polarissync.domain.identifiers import ComputerIdentifier, identifier_set

logger = logging.getLogger(__name__)

# Format-Table underlines the DisplayName header with at least this many dashes
HEADER_SEPARATOR = "-" * 11

DEVICE_QUERY = (
    "Get-AzureADDevice -All $true -ErrorAction Stop"
    " | Where {($_.DeviceTrustType -eq \"AzureAD\") -and ($_.ProfileType -eq \"RegisteredDevice\")}"
    " | Format-Table -Property DisplayName"
)

# Written after the device table; a session that never prints it did not finish
COMPLETION_MARKER = "##polarissync-devices-complete##"


@dataclass
class SessionOutput:
    """Everything the shell wrote, plus its exit code."""

    stdout: str
    stderr: str
    exit_code: int


def _ps_quote(value: str) -> str:
    """Escape a value for a single-quoted PowerShell string."""
    return value.replace("'", "''")


def _or_exit(command: str) -> str:
    """Run a command so that any error ends the shell with exit code 1."""
    return f"try {{ {command} }} catch {{ [Console]::Error.WriteLine($_); exit 1 }}"


def build_device_script(user_principal: str, password: str) -> List[str]:
    """
    Commands that sign in to Azure AD and print the device table.

    A shell fed from stdin keeps going after a failed cmdlet and still
    exits 0, so the sign-in and the query both exit 1 on error and the
    script ends by printing COMPLETION_MARKER.

    Args:
        user_principal: user@domain used for Connect-AzureAD
        password: Plain text password, converted to a SecureString in the session

    Returns:
        One command per line, in execution order
    """
    return [
        f"$userName = '{_ps_quote(user_principal)}'",
        f"$passText = '{_ps_quote(password)}'",
        "$secpasswd = ConvertTo-SecureString -String $passText -AsPlainText -Force",
        "$creds = New-Object System.Management.Automation.PSCredential ($userName, $secpasswd)",
        # Connect-AzureAD prints its own table; keep it out of the report
        _or_exit("Connect-AzureAD -Credential $creds -ErrorAction Stop | Out-Null"),
        _or_exit(DEVICE_QUERY),
        f"Write-Output '{COMPLETION_MARKER}'",
    ]


def split_at_marker(text: str) -> str | None:
    """
    Return the output written before COMPLETION_MARKER.

    None means the marker never appeared and the script did not run to the end.
    """
    lines = text.splitlines()
    for index, line in enumerate(lines):
        if line.strip() == COMPLETION_MARKER:
            return "\n".join(lines[:index])
    return None


def parse_device_report(text: str) -> List[str]:
    """
    Extract device names from Format-Table output.

    Everything up to and including the dashed header separator is skipped.
    Each following non-blank line is one device; the first blank line ends
    the table and anything after it is ignored.
    """
    devices: List[str] = []
    in_table = False
    for line in text.splitlines():
        stripped = line.strip()
        if not in_table:
            if stripped.startswith(HEADER_SEPARATOR):
                in_table = True
            continue
        if not stripped:
            break
        devices.append(stripped)
    return devices


class PowerShellSession:
    """
    One-shot interactive shell process.

    The command is started with stdin, stdout and stderr piped. A writer
    thread sends the script and closes stdin to signal end of input.
    """

    def __init__(self, executable: str = "powershell", command: Sequence[str] | None = None):
        """
        Args:
            executable: Shell executable, started with -nologo -noprofile
            command: Full argv to run instead of the default shell invocation
        """
        self.command = list(command) if command else [executable, "-nologo", "-noprofile"]

    @staticmethod
    def _write_commands(stream: IO[str], commands: Sequence[str]) -> None:
        try:
            for command in commands:
                stream.write(command + "\n")
            stream.flush()
        except OSError as e:
            # The shell exited early; its exit code tells the real story
            logger.debug("Shell closed stdin early: %s", e)
        finally:
            try:
                stream.close()
            except OSError:
                pass

    def run(self, commands: Sequence[str]) -> SessionOutput:
        """
        Run the commands and collect all output.

        Raises:
            CloudDirectoryError: If the shell cannot be started
        """
        try:
            proc = subprocess.Popen(
                self.command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise CloudDirectoryError(f"failed to connect to powershell: {e}", source="azure") from e

        stderr_chunks: List[str] = []
        writer = threading.Thread(
            target=self._write_commands, args=(proc.stdin, commands), daemon=True
        )
        stderr_reader = threading.Thread(
            target=lambda: stderr_chunks.append(proc.stderr.read()), daemon=True
        )
        writer.start()
        stderr_reader.start()

        stdout = proc.stdout.read()
        stderr_reader.join()
        writer.join()
        proc.stdout.close()
        proc.stderr.close()
        exit_code = proc.wait()

        return SessionOutput(stdout=stdout, stderr="".join(stderr_chunks), exit_code=exit_code)


class AzurePowerShellReader:
    """Azure AD devices via the AzureAD PowerShell module."""

    name = "azure"

    def __init__(self, settings: AzureSettings, directory: ActiveDirectorySettings,
                 session: PowerShellSession | None = None):
        """
        Args:
            settings: Azure section of the configuration
            directory: Active Directory section; its user name and password sign in to Azure
            session: Shell session to use; a default powershell session otherwise
        """
        self.settings = settings
        self.directory = directory
        self.session = session or PowerShellSession(settings.shell)

    @property
    def user_principal(self) -> str:
        return f"{self.directory.username}@{self.settings.domain}"

    def list_computers(self) -> FrozenSet[ComputerIdentifier]:
        """
        Enumerate Azure AD joined, registered devices.

        An empty device table is a valid result, but only from a script that
        ran to completion.

        Raises:
            CloudDirectoryError: If the shell cannot start, exits non-zero,
                or stops before printing the completion marker
        """
        script = build_device_script(
            self.user_principal, self.directory.password.get_secret_value()
        )
        output = self.session.run(script)
        if output.exit_code != 0:
            raise CloudDirectoryError(
                f"failed to retrieve records from Azure: exit status {output.exit_code}\n"
                f"{output.stderr.strip()}",
                source=self.name,
            )

        report = split_at_marker(output.stdout)
        if report is None:
            raise CloudDirectoryError(
                "failed to retrieve records from Azure: session ended before the device query completed\n"
                f"{output.stderr.strip()}",
                source=self.name,
            )

        computers = identifier_set(parse_device_report(report))
        logger.info("%d records retrieved from Azure", len(computers))
        return computers
