"""
End-to-end tests for the comparison run: state machine, executor and CLI.
"""

import json
import os
from unittest.mock import MagicMock

import pytest
import yaml

from domain.config import ComparisonConfig, DatasetConfig, OutputConfig
from domain.errors import EmptyDatasetError
from orchestration import PipelineContext, PipelineState, StateMachine
from orchestration.handlers.base import StateHandler
from orchestration.states import NEXT_STATE, is_valid_transition
from pipeline.executor import PipelineExecutor
import main as cli


PDF_NAMES = ("L1EnergySumsUnpacked.pdf", "L1CaloTPUnpacked.pdf", "L1CaloTPEtaPhiUnpacked.pdf")


def make_config(old_dir, new_dir, output_dir, **output_kwargs):
    return ComparisonConfig(
        old=DatasetConfig("old", "2018 MB MC", str(old_dir)),
        new=DatasetConfig("new", "2022 MB MC", str(new_dir)),
        output=OutputConfig(output_dir=str(output_dir), **output_kwargs),
    )


class _StaticHandler(StateHandler):
    """Handler returning a fixed next state."""

    def __init__(self, next_state=None, error=None):
        super().__init__()
        self.next_state = next_state
        self.error = error
        self.calls = 0

    def handle(self, context):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return context, self.next_state or self._determine_next_state(context)


class TestStates:
    """Tests for state transitions."""

    def test_happy_path_is_valid(self):
        """Test that every happy-path step is a valid transition."""
        for current, following in NEXT_STATE.items():
            assert is_valid_transition(current, following)

    def test_any_phase_may_fail(self):
        """Test that every non-terminal state may move to FAILED."""
        for state in NEXT_STATE:
            assert is_valid_transition(state, PipelineState.FAILED)

    def test_terminal_states(self):
        """Test that terminal states have no outgoing transitions."""
        assert PipelineState.COMPLETED.is_terminal()
        assert PipelineState.FAILED.is_terminal()
        assert not is_valid_transition(PipelineState.COMPLETED, PipelineState.IDLE)
        assert not is_valid_transition(PipelineState.DISCOVERING, PipelineState.REPORTING)


class TestStateMachine:
    """Tests for StateMachine."""

    def _context(self, tmp_path):
        return PipelineContext(
            config=make_config(tmp_path / "a", tmp_path / "b", tmp_path),
            current_state=PipelineState.IDLE,
        )

    def test_runs_phases_in_order(self, tmp_path):
        """Test that every phase handler runs once and the run completes."""
        handlers = {state: _StaticHandler() for state in (
            PipelineState.DISCOVERING,
            PipelineState.AGGREGATING,
            PipelineState.NORMALIZING,
            PipelineState.REPORTING,
        )}

        final = StateMachine(handlers).run(self._context(tmp_path))

        assert final.is_successful
        assert all(h.calls == 1 for h in handlers.values())

    def test_handler_exception_fails_run(self, tmp_path):
        """Test that an exception moves the run to FAILED with its type."""
        reporting = _StaticHandler()
        handlers = {
            PipelineState.DISCOVERING: _StaticHandler(),
            PipelineState.AGGREGATING: _StaticHandler(error=EmptyDatasetError("no events")),
            PipelineState.NORMALIZING: _StaticHandler(),
            PipelineState.REPORTING: reporting,
        }

        final = StateMachine(handlers).run(self._context(tmp_path))

        assert final.has_error
        assert "no events" in final.error_message
        assert final.error_details["error_type"] == "EmptyDatasetError"
        assert final.error_details["state"] == "AGGREGATING"
        assert reporting.calls == 0

    def test_invalid_transition_fails_run(self, tmp_path):
        """Test that a handler skipping a phase fails the run."""
        handlers = {
            PipelineState.DISCOVERING: _StaticHandler(next_state=PipelineState.REPORTING),
        }

        final = StateMachine(handlers).run(self._context(tmp_path))

        assert final.has_error
        assert "Invalid state transition" in final.error_message


class TestPipelineExecutor:
    """End-to-end tests for PipelineExecutor."""

    def test_full_comparison(self, dataset_dirs, tmp_path):
        """Test that a run writes all documents and the summary."""
        old_dir, new_dir = dataset_dirs
        out = tmp_path / "out"

        final = PipelineExecutor(make_config(old_dir, new_dir, out)).run()

        assert final.is_successful, final.error_message
        for name in PDF_NAMES:
            assert (out / name).exists()
            assert not (out / (name + ".part")).exists()

        old, new = final.results["old"], final.results["new"]
        assert old.normalized and new.normalized
        assert old.event_count == 3
        assert new.event_count == 5
        assert final.files == {
            "old": (str(old_dir / "crab" / "L1Ntuple_1.root"),),
            "new": (str(new_dir / "L1Ntuple_2.root"), str(new_dir / "crab" / "L1Ntuple_1.root")),
        }

        # Each dataset's nTowers histogram integrates to one after scaling
        assert old.calo_wide["nTowers"].integral(include_flow=True) == pytest.approx(1.0)
        assert new.calo_wide["nTowers"].integral(include_flow=True) == pytest.approx(1.0)
        assert [d.page_count for d in final.documents] == [19, 8, 2]

        with open(final.summary_path) as f:
            summary = json.load(f)
        assert summary["datasets"]["old"]["event_count"] == 3
        assert summary["datasets"]["new"]["event_count"] == 5
        assert summary["datasets"]["new"]["file_count"] == 2
        assert len(summary["documents"]) == 3

    def test_summary_can_be_disabled(self, dataset_dirs, tmp_path):
        """Test that no summary is written without a summary filename."""
        old_dir, new_dir = dataset_dirs
        out = tmp_path / "out"

        final = PipelineExecutor(make_config(old_dir, new_dir, out, summary_filename=None)).run()

        assert final.is_successful
        assert final.summary_path is None
        assert sorted(os.listdir(out)) == sorted(PDF_NAMES)

    def test_empty_dataset_fails_before_reporting(self, dataset_dirs, tmp_path):
        """Test that a dataset without files fails the run and writes nothing."""
        old_dir, _ = dataset_dirs
        empty = tmp_path / "empty"
        empty.mkdir()
        out = tmp_path / "out"
        renderer = MagicMock()

        final = PipelineExecutor(make_config(old_dir, empty, out), renderer=renderer).run()

        assert final.has_error
        assert final.error_details["error_type"] == "EmptyDatasetError"
        renderer.open.assert_not_called()
        assert not out.exists()

    def test_renderer_failure_leaves_no_document(self, dataset_dirs, tmp_path):
        """Test that a failing render leaves no document under its final name."""
        old_dir, new_dir = dataset_dirs
        out = tmp_path / "out"
        renderer = MagicMock()
        renderer.draw_comparison.side_effect = OSError("device full")

        final = PipelineExecutor(make_config(old_dir, new_dir, out), renderer=renderer).run()

        assert final.has_error
        assert final.error_details["state"] == "REPORTING"
        renderer.abort.assert_called_once()
        renderer.close.assert_not_called()


class TestMain:
    """Tests for the command-line entry point."""

    def _write_config(self, tmp_path, out):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"output": {"output_dir": str(out)}}))
        return str(path)

    @pytest.mark.parametrize("argv", [[], ["only_one_dir"]])
    def test_wrong_argument_count(self, argv, capsys):
        """Test that a wrong argument count prints usage and returns 1."""
        assert cli.main(argv) == 1

        captured = capsys.readouterr()
        assert "usage:" in captured.out
        assert "ERROR:" in captured.out

    def test_successful_run(self, dataset_dirs, tmp_path):
        """Test a full run through the command line."""
        old_dir, new_dir = dataset_dirs
        out = tmp_path / "out"
        config_path = self._write_config(tmp_path, out)

        code = cli.main([str(old_dir), str(new_dir), "--config", config_path])

        assert code == 0
        for name in PDF_NAMES:
            assert (out / name).exists()

    def test_empty_dataset_exit_code(self, dataset_dirs, tmp_path):
        """Test that an empty dataset exits with 1 and writes no documents."""
        old_dir, _ = dataset_dirs
        empty = tmp_path / "empty"
        empty.mkdir()
        out = tmp_path / "out"
        config_path = self._write_config(tmp_path, out)

        assert cli.main([str(old_dir), str(empty), "--config", config_path]) == 1
        assert not out.exists()

    def test_missing_config_file(self, dataset_dirs, tmp_path):
        """Test that an explicit but missing config file fails the run."""
        old_dir, new_dir = dataset_dirs
        assert cli.main([str(old_dir), str(new_dir), "--config", str(tmp_path / "nope.yaml")]) == 1

    def test_directories_override_yaml(self, tmp_path):
        """Test that positional directories replace configured ones."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({
            "datasets": {"old": {"input_dir": "/elsewhere", "label": "Run 2"}},
        }))
        args = cli.parse_args(["/data/old", "/data/new", "--config", str(path)])

        config = cli.build_config(args)

        assert config.old.input_dir == "/data/old"
        assert config.old.label == "Run 2"
        assert config.new.input_dir == "/data/new"
        assert config.new.label == "2022 MB MC"
