"""Tests for genealogy configuration."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from virus_genealogy.config import GenealogyConfig


class TestGenealogyConfig:
    """Tests for GenealogyConfig class."""

    def test_defaults(self) -> None:
        config = GenealogyConfig()

        assert config.verbosity == 0
        assert config.log_to_file is False
        assert config.log_dir is None
        assert config.check_invariants is False

    def test_from_dict(self) -> None:
        config = GenealogyConfig.from_dict(
            {"verbosity": 2, "log_to_file": True, "log_dir": "/tmp/logs", "check_invariants": True}
        )

        assert config.verbosity == 2
        assert config.log_to_file is True
        assert config.log_dir == Path("/tmp/logs")
        assert config.check_invariants is True

    def test_from_dict_empty_uses_defaults(self) -> None:
        assert GenealogyConfig.from_dict({}) == GenealogyConfig()

    def test_from_env(self, tmp_path: Path) -> None:
        env = {
            "VIRUS_GENEALOGY_VERBOSITY": "1",
            "VIRUS_GENEALOGY_LOG_DIR": str(tmp_path),
            "VIRUS_GENEALOGY_CHECK_INVARIANTS": "Yes",
        }
        with patch.dict("os.environ", env, clear=True):
            config = GenealogyConfig.from_env()

        assert config.verbosity == 1
        assert config.log_to_file is True
        assert config.log_dir == tmp_path
        assert config.check_invariants is True

    def test_from_env_unset(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            assert GenealogyConfig.from_env() == GenealogyConfig()

    @pytest.mark.parametrize("value", ["0", "false", "off", ""])
    def test_from_env_check_invariants_falsy(self, value: str) -> None:
        with patch.dict("os.environ", {"VIRUS_GENEALOGY_CHECK_INVARIANTS": value}, clear=True):
            assert GenealogyConfig.from_env().check_invariants is False

    def test_from_env_bad_verbosity_raises(self) -> None:
        with (
            patch.dict("os.environ", {"VIRUS_GENEALOGY_VERBOSITY": "loud"}, clear=True),
            pytest.raises(ValueError),
        ):
            GenealogyConfig.from_env()

    def test_configure_logging_applies_settings(self, tmp_path: Path) -> None:
        config = GenealogyConfig(verbosity=2, log_to_file=True, log_dir=tmp_path / "logs")

        with patch("virus_genealogy.observability.logging.configure_logging") as mock_configure:
            config.configure_logging()

        mock_configure.assert_called_once_with(
            verbosity=2, log_to_file=True, log_dir=tmp_path / "logs"
        )

    def test_genealogy_does_not_apply_logging_fields(self) -> None:
        """Only check_invariants is read by the genealogy; logging stays opt-in."""
        import logging

        from tests.fixtures.viruses import Virus
        from virus_genealogy.graph import VirusGenealogy

        package_logger = logging.getLogger("virus_genealogy")
        handlers = list(package_logger.handlers)

        with patch("virus_genealogy.observability.logging.configure_logging") as mock_configure:
            VirusGenealogy(Virus, "W1", config=GenealogyConfig(verbosity=2))

        mock_configure.assert_not_called()
        assert package_logger.handlers == handlers
