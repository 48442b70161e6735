"""Tests for log redaction."""

from pathlib import Path

from loguru import logger

from arkade_wallet.log import REDACTED, redact, setup_logging

PHRASE = " ".join(["abandon"] * 11 + ["about"])


class TestRedact:
    """Tests for redact()."""

    def test_private_key(self) -> None:
        text = redact(f"loaded key {'ab' * 32} from storage")
        assert "ab" * 32 not in text
        assert REDACTED in text

    def test_prefixed_key(self) -> None:
        assert redact("0x" + "CD" * 32) == REDACTED

    def test_seed_phrase(self) -> None:
        text = redact(f"phrase: {PHRASE}")
        assert "abandon" not in text

    def test_longer_hex_run_kept(self) -> None:
        """Only exact 64-character runs are treated as keys."""
        value = "ab" * 40
        assert redact(value) == value

    def test_ordinary_message_unchanged(self) -> None:
        message = "Wallet initialized from storage"
        assert redact(message) == message


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_file_sink_is_redacted(self, tmp_path: Path) -> None:
        log_file = tmp_path / "wallet.log"
        setup_logging(level="DEBUG", log_file=log_file)
        try:
            logger.info("key {}", "ef" * 32)
            logger.complete()
        finally:
            logger.remove()

        content = log_file.read_text()
        assert "ef" * 32 not in content
        assert REDACTED in content
