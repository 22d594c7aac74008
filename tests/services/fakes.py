"""Scripted stand-ins for the sandbox executor and runtime probe.

Invariants:
    - FakeExecutor records every ExecutionRequest and replays queued outcomes
    - ProbeCounter is a plain async callable, as ToolDispatch expects
"""

from codemode.core.execution import ExecutionOutcome, ExecutionRequest, ExecutionSuccess
from codemode.infrastructure.runtime_probe import RuntimeProbe

PROXY_BASE = "http://127.0.0.1:3001"

INSTALLED_RUNTIME = RuntimeProbe(installed=True, version_text="deno 2.1.4")
MISSING_RUNTIME = RuntimeProbe(installed=False, error="No such file or directory: 'deno'")


class FakeExecutor:
    def __init__(self, *outcomes: ExecutionOutcome):
        self.requests: list[ExecutionRequest] = []
        self._outcomes = list(outcomes)

    async def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
        self.requests.append(request)
        if self._outcomes:
            return self._outcomes.pop(0)
        return ExecutionSuccess(stdout="", stderr="")


class ProbeCounter:
    def __init__(self, probe: RuntimeProbe):
        self.probe = probe
        self.calls = 0

    async def __call__(self) -> RuntimeProbe:
        self.calls += 1
        return self.probe
