import json

from typer.testing import CliRunner

from hashtree.merkle import build_root
from hashtree_cli import __main__ as cli

runner = CliRunner()

ROOT = "58c89d709329eb37285837b042ab6ff72c7c8f74de0446b091b6a0131c102cfd"


def _leaf_file(tmp_path, lines=("a", "b", "c", "d")):
    p = tmp_path / "leaves.txt"
    p.write_text("\n".join(lines) + "\n")
    return p


def test_root_from_file(tmp_path):
    r = runner.invoke(cli.app, ["root", str(_leaf_file(tmp_path))])
    assert r.exit_code == 0, r.output
    assert ROOT in r.stdout


def test_root_from_directory(tmp_path):
    d = tmp_path / "items"
    d.mkdir()
    for name, body in [("2.bin", b"\x00\x01"), ("1.bin", b"first")]:
        (d / name).write_bytes(body)
    r = runner.invoke(cli.app, ["root", str(d)])
    assert r.exit_code == 0, r.output
    assert build_root([b"first", b"\x00\x01"]) in r.stdout


def test_root_rejects_non_power_of_two(tmp_path):
    r = runner.invoke(cli.app, ["root", str(_leaf_file(tmp_path, ("a", "b", "c")))])
    assert r.exit_code == 2
    assert "power of two" in r.output


def test_root_missing_source(tmp_path):
    r = runner.invoke(cli.app, ["root", str(tmp_path / "nope")])
    assert r.exit_code == 2


def test_max_leaves(tmp_path, monkeypatch):
    monkeypatch.setattr(cli.settings, "max_leaves", 2)
    r = runner.invoke(cli.app, ["root", str(_leaf_file(tmp_path))])
    assert r.exit_code == 2
    assert "HASHTREE_MAX_LEAVES" in r.output


def test_paths_to_stdout(tmp_path):
    r = runner.invoke(cli.app, ["paths", str(_leaf_file(tmp_path))])
    assert r.exit_code == 0, r.output
    proofs = json.loads(r.stdout)
    assert [p["index"] for p in proofs] == [0, 1, 2, 3]
    assert {p["root"] for p in proofs} == {ROOT}
    assert proofs[1]["path"][0]["orientation"] == "left"


def test_paths_then_verify(tmp_path):
    out = tmp_path / "proofs.json"
    r = runner.invoke(cli.app, ["paths", str(_leaf_file(tmp_path)), "--out", str(out)])
    assert r.exit_code == 0, r.output
    assert "Wrote 4 proofs" in r.output

    r = runner.invoke(cli.app, ["verify", str(out), "--leaf", "c", "--index", "2"])
    assert r.exit_code == 0, r.output
    assert "'verified': True" in r.stdout

    r = runner.invoke(cli.app, ["verify", str(out), "--leaf", "c", "--index", "1"])
    assert r.exit_code == 1
    assert "'verified': False" in r.stdout


def test_verify_single_proof_and_leaf_file(tmp_path):
    out = tmp_path / "proofs.json"
    runner.invoke(cli.app, ["paths", str(_leaf_file(tmp_path)), "--out", str(out)])
    single = tmp_path / "proof-3.json"
    single.write_text(json.dumps(json.loads(out.read_text())[3]))
    leaf = tmp_path / "leaf"
    leaf.write_bytes(b"d")
    r = runner.invoke(cli.app, ["verify", str(single), "--leaf-file", str(leaf)])
    assert r.exit_code == 0, r.output


def test_verify_requires_index_for_proof_lists(tmp_path):
    out = tmp_path / "proofs.json"
    runner.invoke(cli.app, ["paths", str(_leaf_file(tmp_path)), "--out", str(out)])
    r = runner.invoke(cli.app, ["verify", str(out), "--leaf", "a"])
    assert r.exit_code == 2
    assert "--index" in r.output


def test_verify_rejects_malformed_proof(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"index": 0, "tree_size": 4, "root": ROOT, "path": []}))
    r = runner.invoke(cli.app, ["verify", str(bad), "--leaf", "a"])
    assert r.exit_code == 2


def test_verify_needs_exactly_one_leaf_source(tmp_path):
    r = runner.invoke(cli.app, ["verify", str(tmp_path / "p.json")])
    assert r.exit_code == 2


def test_verify_missing_leaf_file_is_input_error(tmp_path):
    out = tmp_path / "proofs.json"
    runner.invoke(cli.app, ["paths", str(_leaf_file(tmp_path)), "--out", str(out)])
    r = runner.invoke(
        cli.app,
        ["verify", str(out), "--leaf-file", str(tmp_path / "missing"), "--index", "0"],
    )
    assert r.exit_code == 2


def test_paths_unwritable_out_is_input_error(tmp_path):
    out = tmp_path / "no-such-dir" / "proofs.json"
    r = runner.invoke(cli.app, ["paths", str(_leaf_file(tmp_path)), "--out", str(out)])
    assert r.exit_code == 2
    assert "Cannot write proofs" in r.output
    assert not out.exists()
