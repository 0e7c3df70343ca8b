"""Tests for DotenvFile."""

from core.infrastructure.adapters.environment.dotenv_file import DotenvFile


def test_read_missing_file_is_empty(tmp_path):
    assert DotenvFile(tmp_path / ".env").read() == {}


def test_set_creates_file_and_replaces_in_place(tmp_path):
    path = tmp_path / ".env"
    path.write_text("# Razorpay\nRAZORPAY_KEY_ID=old\nPORT=5000\n")
    env_file = DotenvFile(path)

    env_file.set("RAZORPAY_KEY_ID", "rzp_test_123")
    env_file.set("GOAFFPRO_STORE_ID", "42")

    assert env_file.read() == {
        "RAZORPAY_KEY_ID": "rzp_test_123",
        "PORT": "5000",
        "GOAFFPRO_STORE_ID": "42",
    }
    lines = path.read_text().splitlines()
    assert lines[0] == "# Razorpay"
    assert lines[1].startswith("RAZORPAY_KEY_ID=")

    fresh = DotenvFile(tmp_path / "nested" / ".env")
    fresh.set("PORT", "5000")
    assert fresh.read() == {"PORT": "5000"}


def test_unset_removes_only_that_key(tmp_path):
    path = tmp_path / ".env"
    path.write_text("PROKERALA_API_KEY=pk\nPROKERALA_USER_ID=user\n")
    env_file = DotenvFile(path)

    assert env_file.unset("PROKERALA_API_KEY") is True
    assert env_file.unset("PROKERALA_API_KEY") is False
    assert env_file.read() == {"PROKERALA_USER_ID": "user"}
    assert DotenvFile(tmp_path / "absent.env").unset("PORT") is False
