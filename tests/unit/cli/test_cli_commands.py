"""Tests for the flowpath command line."""

import pytest
import yaml
from typer.testing import CliRunner

from flowpath.cli.commands.walk import parse_terminal_answer
from flowpath.cli.main import app
from tests.factories import make_block, make_node

WIDE = {"COLUMNS": "200"}


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def flow_file(tmp_path):
    path = tmp_path / "onboarding.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "title": "Onboarding",
                "nodes": [
                    make_node("A", ["lb1"], question="multiple-choice", options=["Yes", "No"]),
                    make_node("B"),
                    make_node("C"),
                ],
                "logicBlocks": [make_block("lb1", "if-else", ["B", "C"], conditions=["yes"])],
            }
        )
    )
    return path


@pytest.fixture
def broken_config(tmp_path):
    path = tmp_path / "flowpath.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "flows": {
                    "broken": {"nodes": [make_node("a", ["ghost"])]},
                    "fine": {"nodes": [make_node("a", ["b"]), make_node("b")]},
                }
            }
        )
    )
    return path


def test_cli_help(runner):
    """Test CLI help lists the commands"""
    # Act
    result = runner.invoke(app, ["--help"])

    # Assert
    assert result.exit_code == 0
    assert "validate" in result.stdout
    assert "walk" in result.stdout
    assert "server" in result.stdout


def test_cli_version(runner):
    """Test CLI version flag"""
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "flowpath version" in result.stdout


def test_validate_clean_flow(runner, flow_file):
    """Test validate passes a clean flow file"""
    result = runner.invoke(app, ["validate", str(flow_file)], env=WIDE)

    assert result.exit_code == 0
    assert "Flow 'onboarding': OK" in result.stdout


def test_validate_reports_errors(runner, broken_config):
    """Test validate fails on a dangling connection"""
    # Act
    result = runner.invoke(app, ["validate", str(broken_config)], env=WIDE)

    # Assert
    assert result.exit_code == 1
    assert "dangling-connection" in result.stdout
    assert "Flow 'fine': OK" in result.stdout


def test_validate_single_flow(runner, broken_config):
    """Test --flow limits validation to one flow"""
    result = runner.invoke(app, ["validate", str(broken_config), "--flow", "fine"], env=WIDE)

    assert result.exit_code == 0


def test_validate_unknown_flow(runner, broken_config):
    result = runner.invoke(app, ["validate", str(broken_config), "--flow", "nope"], env=WIDE)

    assert result.exit_code == 2


def test_validate_strict_fails_on_warnings(runner, tmp_path):
    """Test --strict turns warnings into failures"""
    # Arrange
    path = tmp_path / "fanout.yaml"
    path.write_text(
        yaml.safe_dump({"nodes": [make_node("a", ["b", "c"]), make_node("b"), make_node("c")]})
    )

    # Act
    relaxed = runner.invoke(app, ["validate", str(path)], env=WIDE)
    strict = runner.invoke(app, ["validate", str(path), "--strict"], env=WIDE)

    # Assert
    assert relaxed.exit_code == 0
    assert "unused-connections" in relaxed.stdout
    assert strict.exit_code == 1


def test_walk_branching_flow(runner, flow_file):
    """Test walking a flow by answering in the terminal"""
    # Act: pick option 2 ("No"), then continue past C
    result = runner.invoke(app, ["walk", str(flow_file)], input="2\n\n", env=WIDE)

    # Assert
    assert result.exit_code == 0
    assert "Flow completed." in result.stdout
    assert "A -> C" in result.stdout


def test_walk_back_command(runner, flow_file):
    """Test :back returns to the previous page"""
    result = runner.invoke(
        app, ["walk", str(flow_file)], input="Yes\n:back\nNo\n\n", env=WIDE
    )

    assert result.exit_code == 0
    assert "A -> B -> C" in result.stdout


def test_walk_quit(runner, flow_file):
    result = runner.invoke(app, ["walk", str(flow_file)], input=":quit\n", env=WIDE)

    assert result.exit_code == 0
    assert "Flow completed." not in result.stdout


def test_walk_needs_flow_choice(runner, broken_config):
    result = runner.invoke(app, ["walk", str(broken_config)], env=WIDE)

    assert result.exit_code == 2
    assert "--flow" in result.stdout


class TestParseTerminalAnswer:
    """Tests for turning typed input into answers."""

    def test_option_number(self):
        assert parse_terminal_answer("2", "multiple-choice", ["Yes", "No"]) == "No"

    def test_option_text(self):
        assert parse_terminal_answer(" Yes ", "multiple-choice", ["Yes", "No"]) == "Yes"

    def test_several_picks_become_a_list(self):
        assert parse_terminal_answer("1, 2", "multiple-choice", ["Yes", "No"]) == ["Yes", "No"]

    def test_checkbox_is_always_a_list(self):
        assert parse_terminal_answer("1", "checkbox-multi", ["Red", "Blue"]) == ["Red"]

    def test_out_of_range_number_is_kept_as_text(self):
        assert parse_terminal_answer("7", "multiple-choice", ["Yes", "No"]) == "7"

    def test_slider_numbers(self):
        assert parse_terminal_answer("7", "scale-slider", []) == 7
        assert parse_terminal_answer("7.5", "scale-slider", []) == 7.5
        assert parse_terminal_answer("lots", "scale-slider", []) == "lots"

    def test_free_text(self):
        assert parse_terminal_answer("  Ada  ", "short-answer", []) == "Ada"
