"""
Module 09C - CLI Tests

Tests for mmr_cli.main:
1. init / append / root / peaks / node against a snapshot file
2. proof --out then verify (exit 0), wrong value (exit 2)
3. Runtime errors (missing tree, bad hex, internal node) exit 1
4. config --init / --show
"""
import json

import pytest

from fixtures import make_digest, make_digests

from mmr_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    main,
)
from mmr_core.crypto.hashing import to_hex
from mmr_core.merkle.snapshot import load_snapshot


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every command in an empty directory with no user config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in ("MMR_SNAPSHOT_PATH", "MMR_HASHER", "MMR_FIELD_MODULUS", "MMR_LOG_LEVEL", "MMR_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def state(tmp_path):
    path = tmp_path / "tree.json"
    assert main(["init", "--state", str(path)]) == EXIT_SUCCESS
    return path


def _append(state, count):
    values = [to_hex(d) for d in make_digests(count)]
    return main(["append", *values, "--state", str(state), "--json"])


class TestTreeCommands:
    """Tests for init, append and read commands."""

    def test_init_creates_empty_snapshot(self, state):
        tree = load_snapshot(state)
        assert tree.width == 0

    def test_init_refuses_overwrite(self, state):
        assert main(["init", "--state", str(state)]) == EXIT_RUNTIME_ERROR
        assert main(["init", "--state", str(state), "--force"]) == EXIT_SUCCESS

    def test_append_json(self, state, capsys):
        capsys.readouterr()
        assert _append(state, 10) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["leaf_indexes"] == [1, 2, 4, 5, 8, 9, 11, 12, 16, 17]
        assert data["width"] == 10
        assert data["size"] == 18
        assert load_snapshot(state).width == 10

    def test_root(self, state, capsys):
        _append(state, 3)
        capsys.readouterr()
        assert main(["root", "--state", str(state), "--json"]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["width"] == 3
        assert data["root"] == to_hex(load_snapshot(state).root)

    def test_root_human(self, state, capsys):
        capsys.readouterr()
        assert main(["root", "--state", str(state)]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "width: 0" in out

    def test_peaks(self, state, capsys):
        _append(state, 10)
        capsys.readouterr()
        assert main(["peaks", "--state", str(state), "--json"]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["peak_indexes"] == [15, 18]

    def test_node(self, state, capsys):
        _append(state, 2)
        capsys.readouterr()
        assert main(["node", "3", "--state", str(state), "--json"]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["present"] is True

    def test_default_state_path_from_config(self, isolated_cwd):
        (isolated_cwd / "mmr.json").write_text(json.dumps({"state_path": "configured.json"}))
        assert main(["init"]) == EXIT_SUCCESS
        assert (isolated_cwd / "configured.json").exists()

    def test_missing_tree(self, tmp_path):
        assert main(["root", "--state", str(tmp_path / "nope.json")]) == EXIT_RUNTIME_ERROR

    def test_bad_hex(self, state):
        assert main(["append", "0x1234", "--state", str(state)]) == EXIT_RUNTIME_ERROR
        assert load_snapshot(state).width == 0


class TestProofCommands:
    """Tests for proof and verify."""

    def test_proof_then_verify(self, state, tmp_path, capsys):
        _append(state, 10)
        proof_path = tmp_path / "proof17.json"
        assert main(["proof", "17", "--state", str(state), "--out", str(proof_path)]) == EXIT_SUCCESS
        assert json.loads(proof_path.read_text())["leaf_index"] == 17

        capsys.readouterr()
        code = main(["verify", str(proof_path), to_hex(make_digest(10)), "--json"])
        assert code == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["ok"] is True

    def test_verify_wrong_value(self, state, tmp_path, capsys):
        _append(state, 10)
        proof_path = tmp_path / "proof.json"
        main(["proof", "17", "--state", str(state), "--out", str(proof_path)])

        capsys.readouterr()
        code = main(["verify", str(proof_path), to_hex(make_digest(9)), "--json", "--debug"])
        assert code == EXIT_VERIFICATION_FAILED
        data = json.loads(capsys.readouterr().out)
        assert data["ok"] is False
        assert data["checks"][-1]["check_id"] == "peak_hash"

    def test_verify_wrong_value_names_failed_step(self, state, tmp_path, capsys):
        _append(state, 10)
        proof_path = tmp_path / "proof.json"
        main(["proof", "17", "--state", str(state), "--out", str(proof_path)])

        capsys.readouterr()
        assert main(["verify", str(proof_path), to_hex(make_digest(9))]) == EXIT_VERIFICATION_FAILED
        out = capsys.readouterr().out
        assert "ok: false" in out
        assert "peak_hash" in out

    def test_proof_to_stdout(self, state, capsys):
        _append(state, 4)
        capsys.readouterr()
        assert main(["proof", "5", "--state", str(state)]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["leaf_index"] == 5
        assert data["width"] == 4

    def test_proof_internal_node(self, state):
        _append(state, 10)
        assert main(["proof", "14", "--state", str(state)]) == EXIT_RUNTIME_ERROR

    def test_verify_missing_file(self, tmp_path):
        code = main(["verify", str(tmp_path / "none.json"), to_hex(make_digest(1))])
        assert code == EXIT_RUNTIME_ERROR

    def test_verify_malformed_proof(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"root": "0x00"}))
        assert main(["verify", str(path), to_hex(make_digest(1))]) == EXIT_RUNTIME_ERROR


class TestConfigCommand:
    """Tests for config --init and --show."""

    def test_init_and_show(self, isolated_cwd, capsys):
        assert main(["config", "--init"]) == EXIT_SUCCESS
        assert (isolated_cwd / "mmr.json").exists()
        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR

        capsys.readouterr()
        assert main(["config", "--show"]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["state_path"] == "mmr_state.json"
        assert data["hasher"] == "sha256"

    def test_no_command(self):
        assert main([]) == EXIT_RUNTIME_ERROR
