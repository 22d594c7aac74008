"""Runtime Probe — checks that the sandbox runtime is installed and reports its version.

Invariants:
    - probe_runtime() never raises: every failure becomes installed=False with an error
    - The probe is bounded by its own short timeout
"""

import asyncio
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class RuntimeProbe:
    installed: bool
    version_text: str = ""
    error: str | None = None


async def probe_runtime(
    runtime: str, timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
) -> RuntimeProbe:
    """Run `<runtime> --version` and report what came back."""
    try:
        process = await asyncio.create_subprocess_exec(
            runtime, "--version",
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        logger.warning(f"Runtime '{runtime}' not available: {e}")
        return RuntimeProbe(installed=False, error=str(e))

    try:
        stdout, stderr = await asyncio.wait_for(
            process.communicate(), timeout=timeout_seconds,
        )
    except asyncio.TimeoutError:
        if process.returncode is None:
            process.kill()
        await process.wait()
        return RuntimeProbe(
            installed=False,
            error=f"'{runtime} --version' did not finish within {timeout_seconds:g}s",
        )

    if process.returncode != 0:
        detail = stderr.decode("utf-8", errors="replace").strip()
        return RuntimeProbe(
            installed=False,
            error=detail or f"'{runtime} --version' exited with code {process.returncode}",
        )
    return RuntimeProbe(
        installed=True, version_text=stdout.decode("utf-8", errors="replace").strip(),
    )
