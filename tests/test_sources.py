import warnings
from pathlib import Path

import pytest

SERVER_DIR = Path(__file__).resolve().parents[1] / "server"


@pytest.mark.parametrize("path", sorted(SERVER_DIR.rglob("*.py")), ids=lambda p: str(p.relative_to(SERVER_DIR)))
def test_module_compiles_without_warnings(path):
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        compile(path.read_text(encoding="utf-8"), str(path), "exec")
