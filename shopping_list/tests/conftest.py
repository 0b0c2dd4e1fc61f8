import pytest

from shopping_list.config import ENV_KEYS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sample_list(tmp_path):
    p = tmp_path / "list.txt"
    p.write_text(
        "// groceries\n"
        "2 lb. Chicken Breasts, $4.99/lb.\n"
        "\n"
        "10 Sweet Corn, 5/$2.00\n"
        "2 lb. Chicken, 4.99/lb.\n"
        "Corn Chex, $2.79\n",
        encoding="utf-8",
    )
    return p
