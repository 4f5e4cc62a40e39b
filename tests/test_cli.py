"""Unit tests for the kebe command-line interface."""

from __future__ import annotations

import json

import pytest

from kebe import _config
from kebe.cli import build_parser, main
from kebe.commands import generate, normative, norms, search, segment, validate_norm


class TestParser:
    @pytest.mark.parametrize(
        "argv, func",
        [
            (["segment", "doc.md"], segment.run),
            (["validate-norm", "n.json"], validate_norm.run),
            (["norms", "list"], norms.run),
            (["search", "411"], search.run),
            (["generate", "a.md", "b.pdf"], generate.run),
            (["normative", "--theme", "surintensites"], normative.run),
        ],
    )
    def test_dispatch(self, argv, func):
        assert build_parser().parse_args(argv).func is func

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_generate_defaults(self):
        args = build_parser().parse_args(["generate", "a.md"])
        assert args.qcm is None
        assert args.style == "structured"
        assert args.norm == []

    def test_repeated_norm_option(self):
        args = build_parser().parse_args(["search", "x", "--norm", "a.json", "--norm", "b.json"])
        assert args.norm == ["a.json", "b.json"]


class TestConfig:
    def test_defaults(self):
        assert _config.norms_dir() is None
        assert _config.page_size() == 50
        assert _config.qcm_count() == 10
        assert _config.http_timeout() == 30.0
        assert _config.log_level() == "WARNING"

    def test_overrides_and_garbage(self, monkeypatch, tmp_path):
        monkeypatch.setenv("KEBE_NORMS_DIR", str(tmp_path))
        monkeypatch.setenv("KEBE_PAGE_SIZE", "20")
        monkeypatch.setenv("KEBE_QCM_COUNT", "beaucoup")
        monkeypatch.setenv("KEBE_LOG_LEVEL", "debug")
        assert _config.norms_dir() == tmp_path
        assert _config.page_size() == 20
        assert _config.qcm_count() == 10
        assert _config.log_level() == "DEBUG"


class TestValidateNorm:
    def test_valid_file(self, ns_file, capsys):
        main(["validate-norm", str(ns_file)])
        assert "Norme valide" in capsys.readouterr().out

    def test_invalid_file(self, tmp_path, capsys):
        path = tmp_path / "vide.json"
        path.write_text(json.dumps({"metadata": {"id": "x"}, "rules": []}), encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            main(["validate-norm", str(path)])
        assert exc.value.code == 1
        assert "Norme invalide" in capsys.readouterr().out

    def test_missing_file(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["validate-norm", str(tmp_path / "absent.json")])
        assert exc.value.code == 1


class TestNormsAndSearch:
    def test_list(self, ns_file, capsys):
        main(["norms", "list", "--norm", str(ns_file)])
        out = capsys.readouterr().out
        assert "ns-01-001" in out
        assert "1 norme(s), 4 règle(s)" in out

    def test_page(self, ns_file, capsys):
        main(["norms", "page", "ns-01-001", "--size", "2", "--page", "2", "--norm", str(ns_file)])
        out = capsys.readouterr().out
        assert "542" in out
        assert "page 2/2" in out

    def test_toc(self, ns_file, capsys):
        main(["norms", "toc", "ns-01-001", "--norm", str(ns_file)])
        assert "Protection contre les chocs électriques" in capsys.readouterr().out

    def test_norms_dir(self, monkeypatch, tmp_path, ns_payload, capsys):
        (tmp_path / "ns.json").write_text(json.dumps(ns_payload), encoding="utf-8")
        monkeypatch.setenv("KEBE_NORMS_DIR", str(tmp_path))
        main(["norms", "list"])
        assert "ns-01-001" in capsys.readouterr().out

    def test_refused_norm_file(self, tmp_path):
        path = tmp_path / "vide.json"
        path.write_text(json.dumps({"rules": []}), encoding="utf-8")
        with pytest.raises(SystemExit):
            main(["norms", "list", "--norm", str(path)])

    def test_search(self, ns_file, capsys):
        main(["search", "542", "--norm", str(ns_file)])
        out = capsys.readouterr().out
        assert "exact" in out
        assert "fond de fouille" in out

    def test_search_unknown_norm(self, ns_file):
        with pytest.raises(SystemExit) as exc:
            main(["search", "542", "--norm-id", "inconnue", "--norm", str(ns_file)])
        assert exc.value.code == 1

    def test_rule_text_shown_verbatim(self, tmp_path, ns_payload, capsys):
        ns_payload["rules"][0]["titre"] = "[b]Protection[/b]"
        ns_payload["rules"][2]["content"] = "Câble [bold]U-1000[/bold] en tranchée"
        path = tmp_path / "crochets.json"
        path.write_text(json.dumps(ns_payload, ensure_ascii=False), encoding="utf-8")

        main(["search", "542", "--norm", str(path)])
        assert "[bold]U-1000[/bold]" in capsys.readouterr().out

        main(["norms", "page", "ns-01-001", "--size", "2", "--norm", str(path)])
        assert "[b]Protection[/b]" in capsys.readouterr().out

        main(["validate-norm", str(path)])
        out = capsys.readouterr().out
        assert "[b]Protection[/b]" in out
        assert "[bold]U-1000[/bold]" in out


class TestCourseCommands:
    def test_segment(self, tmp_path, sample_text, capsys):
        path = tmp_path / "guide.md"
        path.write_text(sample_text, encoding="utf-8")
        main(["segment", str(path)])
        assert "Protection des installations" in capsys.readouterr().out

    def test_segment_unsupported(self, tmp_path):
        path = tmp_path / "guide.docx"
        path.write_text("x", encoding="utf-8")
        with pytest.raises(SystemExit):
            main(["segment", str(path)])

    def test_generate_to_file(self, tmp_path, sample_text, ns_file):
        source = tmp_path / "guide.md"
        source.write_text(sample_text, encoding="utf-8")
        out = tmp_path / "cours.json"
        main(["generate", str(source), "--qcm", "6", "--norm", str(ns_file), "--out", str(out)])
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["course"]["title"] == "Formation : Protection des installations"
        assert data["norm_rules_used"] > 0
        assert len(data["course"]["content"]["quiz"]) <= 6

    def test_generate_unknown_norm(self, tmp_path, sample_text, ns_file):
        source = tmp_path / "guide.md"
        source.write_text(sample_text, encoding="utf-8")
        with pytest.raises(SystemExit):
            main(["generate", str(source), "--norm", str(ns_file), "--norm-id", "inconnue"])

    def test_normative_to_file(self, tmp_path, ns_file):
        out = tmp_path / "normatif.json"
        main(["normative", "--prefix", "411", "--norm", str(ns_file), "--out", str(out)])
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["course"]["title"] == "Formation NS 01-001 - Articles 411"
        assert [r["id"] for r in data["rules_used"]] == ["r1", "r2"]

    def test_normative_requires_norm(self):
        with pytest.raises(SystemExit):
            main(["normative", "--theme", "surintensites"])

    def test_normative_requires_theme_or_prefix(self, ns_file):
        with pytest.raises(SystemExit):
            main(["normative", "--norm", str(ns_file)])
