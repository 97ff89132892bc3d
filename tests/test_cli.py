import json

import pytest

from stylesync.cli import main
from stylesync.data.store import ProfileStore
from stylesync.profile import StyleProfile


class TestCli:
    def test_version(self, capsys):
        main(["version"])
        assert capsys.readouterr().out.strip() == "stylesync version 0.1.0"

    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 0
        assert "rewrite" in capsys.readouterr().out

    def test_rewrite_text(self, capsys, flood_report):
        main(["rewrite", flood_report, "--seed", "1"])
        assert capsys.readouterr().out.strip() == flood_report

    def test_rewrite_file_to_output(self, tmp_path, flood_report):
        source = tmp_path / "in.txt"
        source.write_text(flood_report)
        target = tmp_path / "out.txt"
        main(["rewrite", "-f", str(source), "-o", str(target), "--seed", "1"])
        assert target.read_text() == flood_report

    def test_rewrite_lexicon_notes(self, capsys):
        main(["rewrite", "A plain plan.", "--lexicon", "grit", "--max-passes", "0", "--lexicon-notes", "--seed", "1"])
        assert capsys.readouterr().out.strip().endswith("Lexicon notes: grit")

    def test_rewrite_missing_file(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["rewrite", "-f", "/nonexistent/input.txt"])
        assert exc.value.code == 1
        assert "File not found" in capsys.readouterr().err

    def test_rewrite_bad_slider(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["rewrite", "Some text.", "--formality", "3"])
        assert exc.value.code == 1

    def test_rewrite_with_stored_profile(self, tmp_path, capsys):
        store_path = str(tmp_path / "profiles.parquet")
        profile_id = ProfileStore(store_path).create(StyleProfile(formality=0.9, user_id="ana"))
        main(["rewrite", "We don't know.", "--store", store_path, "--user", "ana", "--profile", profile_id])
        assert capsys.readouterr().out.strip() == "We do not know."

    def test_rewrite_unknown_profile(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["rewrite", "Text.", "--store", str(tmp_path / "p.parquet"), "--profile", "missing"])
        assert exc.value.code == 1
        assert "Could not load profile" in capsys.readouterr().err

    def test_analyze(self, tmp_path, capsys):
        sample = tmp_path / "sample.txt"
        sample.write_text("However, we stayed in. We read all day.")
        main(["analyze", "--sample", str(sample)])
        data = json.loads(capsys.readouterr().out)
        assert data["preferred_transitions"] == ["However"]
        assert data["pov"]["pov"] == "first"

    def test_analyze_compare(self, tmp_path, capsys):
        sample = tmp_path / "sample.txt"
        sample.write_text("However, we don't stop early. We work until the light goes.")
        output = tmp_path / "output.txt"
        output.write_text("However, we don't quit soon. We keep on until it is dark.")
        main(["analyze", "--sample", str(sample), "--compare", str(output)])
        data = json.loads(capsys.readouterr().out)
        assert data["overall_match"] == 100
