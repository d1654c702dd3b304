"""Tests for the CLI interface."""

from typer.testing import CliRunner

from gangsched.cli.gangsched import cli

runner = CliRunner()


class TestCLIConfig:
    def test_config_runs(self):
        result = runner.invoke(cli, ["config"])
        assert result.exit_code == 0
        assert "Configuration" in result.output
        assert "Least" in result.output

    def test_config_reflects_environment(self, monkeypatch):
        monkeypatch.setenv("GANGSCHED_MODE", "Most")
        result = runner.invoke(cli, ["config"])
        assert "PreferMostAllocated" in result.output


class TestCLIValidate:
    def test_validate_passes(self):
        result = runner.invoke(cli, ["validate"])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_validate_rejects_bad_mode(self, monkeypatch):
        monkeypatch.setenv("GANGSCHED_MODE", "Balanced")
        result = runner.invoke(cli, ["validate"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestCLIAdmit:
    def test_ungated_job_admitted(self):
        result = runner.invoke(cli, ["admit"])
        assert result.exit_code == 0
        assert "Admitted" in result.output

    def test_quorum_met(self):
        result = runner.invoke(cli, ["admit", "--group", "g1", "--quorum", "3", "--members", "3"])
        assert result.exit_code == 0
        assert "Admitted" in result.output

    def test_quorum_not_met(self):
        result = runner.invoke(cli, ["admit", "-g", "g1", "-q", "5", "-m", "3"])
        assert result.exit_code == 1
        assert "insufficient group membership" in result.output

    def test_invalid_quorum(self):
        result = runner.invoke(cli, ["admit", "-g", "g1", "-q", "many", "-m", "3"])
        assert result.exit_code == 1
        assert "invalid quorum specification" in result.output

    def test_negative_members(self):
        result = runner.invoke(cli, ["admit", "-g", "g1", "-q", "1", "-m", "-1"])
        assert result.exit_code == 2


class TestCLIScore:
    def test_least_ranks_smaller_first(self):
        result = runner.invoke(cli, ["score", "m1=100", "m2=200", "--mode", "Least"])
        assert result.exit_code == 0
        lines = [line for line in result.output.splitlines() if "m1" in line or "m2" in line]
        assert "m1" in lines[0]
        assert "100" in lines[0]

    def test_most_ranks_larger_first(self):
        result = runner.invoke(cli, ["score", "m1=100", "m2=200", "--mode", "Most"])
        assert result.exit_code == 0
        lines = [line for line in result.output.splitlines() if "m1" in line or "m2" in line]
        assert "m2" in lines[0]

    def test_binary_suffixes(self):
        result = runner.invoke(cli, ["score", "a=1Ki", "--mode", "Most"])
        assert result.exit_code == 0
        assert "1024" in result.output

    def test_invalid_mode(self):
        result = runner.invoke(cli, ["score", "m1=100", "--mode", "Balanced"])
        assert result.exit_code == 2

    def test_invalid_node_spec(self):
        result = runner.invoke(cli, ["score", "m1"])
        assert result.exit_code == 2
        assert "NAME=MEMORY" in result.output

    def test_duplicate_node_names_rejected(self):
        result = runner.invoke(cli, ["score", "a=1Gi", "b=1Gi", "a=2Gi"])
        assert result.exit_code == 2
        assert "duplicate node names: a" in result.output

    def test_overflowing_node_excluded(self):
        result = runner.invoke(cli, ["score", "m1=100", f"big={2**63}"])
        assert result.exit_code == 0
        assert "Excluded big" in result.output
