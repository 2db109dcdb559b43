"""Presence probe: read the local ARP table and match device identifiers."""

import asyncio
import logging
import re
from typing import Callable, Iterable, Optional, Sequence, Set


logger = logging.getLogger(__name__)

Matcher = Callable[[str, str], bool]

MAC_PATTERN = re.compile(r"\b([0-9a-f]{1,2}(?:[:-][0-9a-f]{1,2}){5})\b", re.IGNORECASE)


class ProbeError(Exception):
    """The presence probe could not produce output."""


def normalize_mac(mac: str) -> str:
    """
    Normalize MAC address to uppercase colon-separated format.

    Accepts colon or dash separated addresses (single-digit octets, as printed
    by macOS ``arp``, are zero padded) and bare 12-digit hex strings.

    Raises:
        ValueError: If the value is not a MAC address
    """
    parts = re.split(r"[:-]", mac.strip())

    if len(parts) == 1:
        bare = parts[0]
        parts = [bare[i:i + 2] for i in range(0, len(bare), 2)] if len(bare) == 12 else []

    if len(parts) != 6 or not all(re.fullmatch(r"[0-9a-fA-F]{1,2}", p) for p in parts):
        raise ValueError(f"Invalid MAC address: {mac}")

    return ":".join(p.zfill(2) for p in parts).upper()


def substring_match(identifier: str, output: str) -> bool:
    """Raw containment check of the identifier in the probe output."""
    return identifier in output


class ArpTableMatcher:
    """
    Structured matcher: parses hardware addresses out of the probe output.

    Identifiers and table entries are compared in normalized form, so
    ``aa-bb-cc-dd-ee-ff`` matches ``AA:BB:CC:DD:EE:FF``. The parsed table is
    cached for the most recent output only.
    """

    def __init__(self):
        self._output: Optional[str] = None
        self._table: Set[str] = set()

    def parse(self, output: str) -> Set[str]:
        """Extract the set of normalized MAC addresses in ``output``."""
        table = set()
        for match in MAC_PATTERN.finditer(output):
            try:
                table.add(normalize_mac(match.group(1)))
            except ValueError:
                continue
        return table

    def __call__(self, identifier: str, output: str) -> bool:
        if output is not self._output:
            self._table = self.parse(output)
            self._output = output

        try:
            return normalize_mac(identifier) in self._table
        except ValueError:
            return False


def get_matcher(name: str) -> Matcher:
    """
    Resolve a matcher by configuration name.

    Raises:
        ValueError: For unknown matcher names
    """
    if name == "substring":
        return substring_match
    if name == "arp_table":
        return ArpTableMatcher()
    raise ValueError(f"Unknown presence matcher: {name!r} (expected 'substring' or 'arp_table')")


def match_identifiers(identifiers: Iterable[str], output: str, matcher: Matcher) -> Set[str]:
    """Identifiers that the matcher finds in the probe output."""
    return {identifier for identifier in identifiers if matcher(identifier, output)}


class ArpProbe:
    """Runs the system ARP command and returns its output as text."""

    def __init__(self, command: Sequence[str] = ("arp", "-a"), timeout: float = 10.0):
        """
        Initialize ARP probe.

        Args:
            command: Command and arguments to run
            timeout: Seconds to wait before killing the command
        """
        if not command:
            raise ValueError("Probe command must not be empty")

        self.command = list(command)
        self.timeout = timeout

    async def __call__(self) -> str:
        return await self.run()

    async def run(self) -> str:
        """
        Run the probe command.

        Returns:
            Decoded standard output

        Raises:
            ProbeError: If the command cannot be run, times out, exits
                non-zero without printing anything, or prints non-UTF-8 output
        """
        try:
            process = await asyncio.create_subprocess_exec(
                *self.command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ProbeError(f"Failed to run {self.command[0]}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            raise ProbeError(f"{self.command[0]} timed out after {self.timeout}s") from e

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            if not stdout.strip():
                raise ProbeError(f"{self.command[0]} exited with {process.returncode}: {message}")
            logger.debug(f"{self.command[0]} exited with {process.returncode}, using its output: {message}")

        try:
            return stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ProbeError(f"{self.command[0]} produced non UTF-8 output") from e
