import importlib.util
from pathlib import Path

SCRIPT = Path(__file__).parent.parent / "scripts" / "extract_objects.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("extract_objects", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_cli_extracts_objects(coco_path, image_dir, tmp_path, capsys):
    out = tmp_path / "cli_out"
    code = _load_script().main([
        "--images", str(image_dir), "--annotation", str(coco_path),
        "--output", str(out), "--workers", "2", "--no-progress",
    ])
    assert code == 0
    assert "Done: 4 objects extracted" in capsys.readouterr().out
    assert (out / "bottle_10.png").exists()


def test_cli_fails_on_unreadable_document(tmp_path):
    code = _load_script().main([
        "--annotation", str(tmp_path / "missing.json"),
        "--output", str(tmp_path / "out"), "--no-progress",
    ])
    assert code == 1
    assert not (tmp_path / "out").exists()
