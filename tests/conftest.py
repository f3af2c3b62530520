import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def _is_e2e_test(request: pytest.FixtureRequest) -> bool:
    return "tests/e2e/" in str(request.node.fspath).replace("\\", "/")


@pytest.fixture(autouse=True)
def disable_sleep(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("time.sleep", lambda *_args, **_kwargs: None)


@pytest.fixture(autouse=True)
def reset_http_circuits() -> None:
    from qiyao.infrastructure.resilient_http import reset_circuit_breakers

    reset_circuit_breakers()
    yield
    reset_circuit_breakers()


@pytest.fixture(autouse=True)
def e2e_offline_env(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if not _is_e2e_test(request):
        return

    for name in ("QIYAO_GEMINI_API_KEY", "GEMINI_API_KEY", "API_KEY", "QIYAO_DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("QIYAO_SEED", "7")
    monkeypatch.setenv("QIYAO_NARRATIVE_RETRIES", "0")
    monkeypatch.setenv("QIYAO_NARRATIVE_TIMEOUT_S", "0.5")


@pytest.fixture(autouse=True)
def e2e_block_external_http(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if not _is_e2e_test(request):
        return

    import httpx

    def _deny_external_http(self, method, url, *args, **kwargs):
        candidate = str(url)
        if candidate.startswith(("http://127.0.0.1", "http://localhost", "https://127.0.0.1", "https://localhost")):
            return _original_request(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP disabled during e2e tests: {candidate}")

    _original_request = httpx.Client.request
    monkeypatch.setattr(httpx.Client, "request", _deny_external_http)
