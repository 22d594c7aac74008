"""Infrastructure fixtures — a stand-in sandbox runtime.

Invariants:
    - fake_runtime mimics the runtime CLI: `--version`, and `run [flags] <file>`
    - Behaviour is chosen by the first line of the submitted source, so tests
      exercise real child processes, pipes, exit codes and kills
"""

import stat
import sys
import textwrap

import pytest

_FAKE_RUNTIME = textwrap.dedent('''\
    import json
    import os
    import sys
    import time

    args = sys.argv[1:]
    if args == ["--version"]:
        print("deno 2.1.4 (stable, release, x86_64-unknown-linux-gnu)")
        print("v8 13.0.245.12-rusty")
        print("typescript 5.6.2")
        sys.exit(0)

    assert args[0] == "run", args
    path = args[-1]
    with open(path, encoding="utf-8") as f:
        source = f.read()
    directive, _, payload = source.partition("\\n")

    if directive == "print":
        sys.stdout.write(payload)
    elif directive == "warn":
        sys.stdout.write("ok\\n")
        sys.stderr.write("Warning: deprecated API\\n")
    elif directive == "silent":
        pass
    elif directive == "argv":
        print(json.dumps({"args": args, "exists": os.path.exists(path)}))
    elif directive == "sleep":
        time.sleep(60)
    elif directive == "read-env":
        sys.stderr.write('error: Uncaught (in promise) NotCapable: Requires env access to "HOME"\\n')
        sys.exit(1)
    elif directive == "read-file":
        sys.stderr.write('error: Uncaught PermissionDenied: Requires read access to "/etc/passwd"\\n')
        sys.exit(1)
    elif directive == "import":
        sys.stderr.write('error: Module not found "https://example.invalid/mod.ts".\\n')
        sys.exit(1)
    elif directive == "throw":
        sys.stderr.write("error: Uncaught Error: boom\\n")
        sys.exit(1)
    else:
        sys.stderr.write("error: unknown directive\\n")
        sys.exit(2)
''')


def _write_executable(path, body: str):
    path.write_text(f"#!{sys.executable}\n{body}", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def fake_runtime(tmp_path):
    """Path to an executable that behaves like the sandbox runtime."""
    return str(_write_executable(tmp_path / "fake-deno", _FAKE_RUNTIME))


@pytest.fixture
def broken_runtime(tmp_path):
    """Executable that exists but fails every invocation."""
    body = "import sys\nsys.stderr.write('broken install\\n')\nsys.exit(1)\n"
    return str(_write_executable(tmp_path / "broken-deno", body))
