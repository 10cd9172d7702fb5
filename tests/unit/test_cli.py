"""
Module 09C - CLI Tests

Drives blockproof_cli.main.main(argv) end to end:
1. root / prove / verify on files and sentences
2. multiprove / multiverify
3. compare
4. upload / fetch against the in-process API
5. config --init / --show
6. Exit codes: 0 success, 1 error, 2 verification failed
"""

import json

import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.deps import get_store
from blockproof_cli.commands import remote
from blockproof_cli.main import create_parser, main
from core.crypto.hashing import to_hex
from core.http import connect
from core.merkle import TreeShape, blocks_from_sentence, build_root


SENTENCE = "You trust, me, right?"


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


@pytest.fixture
def block_files(tmp_path):
    paths = []
    for name, content in [("a.txt", b"alpha"), ("b.txt", b"bravo"), ("c.txt", b"charlie")]:
        path = tmp_path / name
        path.write_bytes(content)
        paths.append(path)
    return paths


def _stdout_json(capsys):
    return json.loads(capsys.readouterr().out)


class TestParser:
    """Tests for argument parsing."""

    def test_no_command_is_error(self, capsys):
        assert main([]) == 1

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "blockproof" in capsys.readouterr().out

    def test_missing_config_file(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "none.json"), "root", "--sentence", "a"]) == 1
        assert "Error loading configuration" in capsys.readouterr().err


class TestRootCommand:
    """Tests for `blockproof root`."""

    def test_root_of_sentence(self, capsys):
        assert main(["root", "--sentence", SENTENCE]) == 0
        assert capsys.readouterr().out.strip() == to_hex(build_root(blocks_from_sentence(SENTENCE)))

    def test_root_of_files(self, block_files, capsys):
        assert main(["root", *map(str, block_files)]) == 0
        assert capsys.readouterr().out.strip() == to_hex(build_root([b"alpha", b"bravo", b"charlie"]))

    def test_ragged_root_json(self, block_files, capsys):
        assert main(["root", "--ragged", "--json", *map(str, block_files)]) == 0
        data = _stdout_json(capsys)

        assert data["shape"] == "ragged"
        assert data["count"] == 3
        assert data["root"] == to_hex(build_root([b"alpha", b"bravo", b"charlie"], TreeShape.RAGGED))

    def test_empty_root(self, capsys):
        assert main(["root"]) == 0
        assert capsys.readouterr().out.strip() == to_hex(build_root([]))


class TestProveAndVerify:
    """Tests for `blockproof prove` and `blockproof verify`."""

    def test_prove_then_verify(self, tmp_path, capsys):
        proof_path = tmp_path / "proof.json"
        root = to_hex(build_root(blocks_from_sentence(SENTENCE)))

        assert main(["prove", "--sentence", SENTENCE, "--index", "1", "--out", str(proof_path)]) == 0
        envelope = json.loads(proof_path.read_text())
        assert envelope["root"] == root
        assert envelope["index"] == 1

        assert main(["verify", "--root", root, "--proof", str(proof_path), "--block", "trust,"]) == 0
        assert capsys.readouterr().out.strip().endswith("valid")

    def test_verify_wrong_block_exit_code(self, tmp_path, capsys):
        proof_path = tmp_path / "proof.json"
        root = to_hex(build_root(blocks_from_sentence(SENTENCE)))
        main(["prove", "--sentence", SENTENCE, "--index", "1", "--out", str(proof_path)])

        code = main(["verify", "--root", root, "--proof", str(proof_path), "--block", "me,", "--json"])

        assert code == 2
        assert json.loads(capsys.readouterr().out.strip().splitlines()[-1]) == {"valid": False}

    def test_verify_file_block(self, block_files, tmp_path):
        proof_path = tmp_path / "p.json"
        root = to_hex(build_root([b"alpha", b"bravo", b"charlie"]))
        main(["prove", *map(str, block_files), "--index", "2", "--out", str(proof_path)])

        assert main(["verify", "--root", root, "--proof", str(proof_path), "--file", str(block_files[2])]) == 0

    def test_prove_stdout_is_canonical(self, capsys):
        assert main(["prove", "--sentence", SENTENCE, "--index", "0"]) == 0
        out = capsys.readouterr().out.strip()

        assert " " not in out
        assert list(json.loads(out)) == ["index", "proof", "root"]

    def test_prove_out_of_range(self, capsys):
        assert main(["prove", "--sentence", SENTENCE, "--index", "4", "--json"]) == 1
        assert _stdout_json(capsys)["code"] == "INDEX_OUT_OF_RANGE"

    def test_verify_bad_root(self, tmp_path, capsys):
        proof_path = tmp_path / "proof.json"
        main(["prove", "--sentence", SENTENCE, "--index", "0", "--out", str(proof_path)])

        assert main(["verify", "--root", "0xabc", "--proof", str(proof_path), "--block", "You"]) == 1


class TestMultiproofCommands:
    """Tests for `blockproof multiprove` and `blockproof multiverify`."""

    def test_multiprove_then_multiverify(self, block_files, tmp_path, capsys):
        proof_path = tmp_path / "multi.json"
        ragged = to_hex(build_root([b"alpha", b"bravo", b"charlie"], TreeShape.RAGGED))

        assert main(["multiprove", *map(str, block_files), "--indices", "2,0", "--out", str(proof_path)]) == 0
        envelope = json.loads(proof_path.read_text())
        assert envelope["leaf_indices"] == [2, 0]
        assert envelope["leaf_count"] == 3
        assert envelope["root"] == ragged

        code = main([
            "multiverify", "--root", ragged, "--proof", str(proof_path),
            "--files", str(block_files[2]), str(block_files[0]),
        ])
        assert code == 0

    def test_multiverify_text_blocks_wrong_order(self, tmp_path):
        proof_path = tmp_path / "multi.json"
        ragged = to_hex(build_root(blocks_from_sentence(SENTENCE), TreeShape.RAGGED))
        main(["multiprove", "--sentence", SENTENCE, "--indices", "0,3", "--out", str(proof_path)])

        ok = ["multiverify", "--root", ragged, "--proof", str(proof_path), "--blocks", "You", "right?"]
        swapped = ["multiverify", "--root", ragged, "--proof", str(proof_path), "--blocks", "right?", "You"]

        assert main(ok) == 0
        assert main(swapped) == 2

    def test_multiverify_leaf_count(self, tmp_path):
        proof_path = tmp_path / "multi.json"
        ragged = to_hex(build_root(blocks_from_sentence(SENTENCE), TreeShape.RAGGED))
        main(["multiprove", "--sentence", SENTENCE, "--indices", "1", "--out", str(proof_path)])
        base = ["multiverify", "--root", ragged, "--proof", str(proof_path), "--blocks", "trust,"]

        assert main([*base, "--leaf-count", "4"]) == 0
        assert main([*base, "--leaf-count", "3"]) == 2

    def test_duplicate_index(self, capsys):
        assert main(["multiprove", "--sentence", SENTENCE, "--indices", "1,1", "--json"]) == 1
        assert _stdout_json(capsys)["code"] == "DUPLICATE_INDEX"

    def test_bad_indices(self, capsys):
        assert main(["multiprove", "--sentence", SENTENCE, "--indices", "a,b"]) == 1


class TestCompareCommand:
    """Tests for `blockproof compare`."""

    def test_compare_json(self, capsys):
        assert main(["compare", "--length", "64", "--proofs", "16", "--seed", "3", "--json"]) == 0
        data = _stdout_json(capsys)

        assert data["blocks"] == 64
        assert data["proofs"] == 16
        assert data["compact_size"] < data["individual_size"]

    def test_compare_too_many_proofs(self, capsys):
        assert main(["compare", "--length", "4", "--proofs", "5"]) == 1


class TestRemoteCommands:
    """Tests for `blockproof upload` and `blockproof fetch`."""

    @pytest.fixture(autouse=True)
    def _in_process_server(self, monkeypatch):
        get_store().clear()
        monkeypatch.setattr(
            remote,
            "build_client",
            lambda config: connect("http://testserver", session=TestClient(app)),
        )
        yield
        get_store().clear()

    def test_upload_stores_roots(self, block_files, tmp_path):
        assert main(["upload", *map(str, block_files)]) == 0

        trusted = remote.load_roots(tmp_path / "merkle_root.txt")
        contents = [b"alpha", b"bravo", b"charlie"]
        assert trusted.padded == build_root(contents)
        assert trusted.ragged == build_root(contents, TreeShape.RAGGED)
        assert trusted.names == ["a.txt", "b.txt", "c.txt"]

    def test_root_file_layout(self, block_files, tmp_path):
        main(["upload", *map(str, block_files)])
        lines = (tmp_path / "merkle_root.txt").read_text().splitlines()

        assert len(lines) == 5
        assert lines[2:] == ["a.txt", "b.txt", "c.txt"]

    def test_root_file_without_names_rejected(self, tmp_path):
        path = tmp_path / "merkle_root.txt"
        root = to_hex(build_root([b"alpha"]))
        path.write_text(f"{root}\n{root}\n")

        with pytest.raises(ValueError):
            remote.load_roots(path)

    def test_fetch_multi_after_server_grew(self, block_files, tmp_path):
        main(["upload", *map(str, block_files)])
        get_store().put_many({"d.txt": b"delta"})

        assert main(["fetch", "a.txt", "c.txt", "--multi", "--out", str(tmp_path / "d")]) == 2

    def test_upload_then_fetch(self, block_files, tmp_path):
        main(["upload", *map(str, block_files)])
        out_dir = tmp_path / "downloads"

        assert main(["fetch", "b.txt", "--out", str(out_dir)]) == 0
        assert (out_dir / "b.txt").read_bytes() == b"bravo"

    def test_fetch_multi(self, block_files, tmp_path, capsys):
        main(["upload", *map(str, block_files)])
        capsys.readouterr()

        assert main(["fetch", "c.txt", "a.txt", "--multi", "--out", str(tmp_path / "d"), "--json"]) == 0
        assert _stdout_json(capsys) == {"valid": True, "names": ["c.txt", "a.txt"]}

    def test_fetch_tampered_not_written(self, block_files, tmp_path):
        main(["upload", *map(str, block_files)])
        get_store().put_many({"a.txt": b"tampered"})
        out_dir = tmp_path / "downloads"

        assert main(["fetch", "a.txt", "--out", str(out_dir)]) == 2
        assert not (out_dir / "a.txt").exists()

    def test_fetch_without_roots(self, capsys):
        assert main(["fetch", "a.txt"]) == 1
        assert "trusted roots" in capsys.readouterr().err

    def test_root_path_from_env(self, block_files, tmp_path, monkeypatch):
        monkeypatch.setenv("BLOCKPROOF_ROOT_PATH", str(tmp_path / "roots.txt"))

        assert main(["upload", *map(str, block_files)]) == 0
        assert (tmp_path / "roots.txt").exists()


class TestConfigCommand:
    """Tests for `blockproof config`."""

    def test_init_writes_template(self, tmp_path):
        path = tmp_path / "cfg.json"

        assert main(["config", "--init", "--path", str(path)]) == 0
        assert json.loads(path.read_text())["client"]["root_path"] == "merkle_root.txt"

    def test_init_refuses_overwrite(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text("{}")

        assert main(["config", "--init", "--path", str(path)]) == 1

    def test_show_uses_config_file(self, tmp_path, capsys):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"client": {"base_url": "http://holder:9999"}}))

        assert main(["--config", str(path), "config", "--show"]) == 0
        assert _stdout_json(capsys)["client"]["base_url"] == "http://holder:9999"
